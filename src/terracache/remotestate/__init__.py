"""Legacy Terraform state parsing.

Public exports:
    parse_terraform_state: Decode state JSON (bytes or str) into a TerraformState
    parse_terraform_state_file: Read and decode a state file from disk
    find_terraform_state_file: Locate the state file of a working directory
    parse_terraform_state_from_location: Locate and decode, None when absent
"""

from terracache.remotestate.parser import (
    DEFAULT_DATA_DIR,
    DEFAULT_STATE_FILE,
    find_terraform_state_file,
    parse_terraform_state,
    parse_terraform_state_file,
    parse_terraform_state_from_location,
)

__all__ = [
    "DEFAULT_DATA_DIR",
    "DEFAULT_STATE_FILE",
    "find_terraform_state_file",
    "parse_terraform_state",
    "parse_terraform_state_file",
    "parse_terraform_state_from_location",
]
