"""Org discovery through the Salesforce CLI.

Runs the configured org list command (`sf org list --json` by default),
parses the non-scratch orgs, and keeps only those that are connected.
Callers partition the result into hub-capable and general subsets.
"""

import json
import logging
import shlex
import shutil
import subprocess

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from core.config import get_settings
from core.errors import OrgDiscoveryError

logger = logging.getLogger("keystone.orgs")

CONNECTED = "Connected"


class OrgInfo(BaseModel):
    """One authenticated org as reported by the org CLI."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    username: str
    alias: str = ""
    org_id: str = Field(default="", alias="orgId")
    is_dev_hub: bool = Field(default=False, alias="isDevHub")
    connected_status: str = Field(default="", alias="connectedStatus")

    @model_validator(mode="before")
    @classmethod
    def alias_defaults_to_username(cls, data: object) -> object:
        """Orgs without an alias are addressed by username."""
        if isinstance(data, dict) and not data.get("alias"):
            data = {**data, "alias": data.get("username", "")}
        return data

    @property
    def is_connected(self) -> bool:
        return self.connected_status == CONNECTED


def is_tool_installed(name: str) -> bool:
    return shutil.which(name) is not None


def parse_org_list(output: str) -> list[OrgInfo]:
    """Parse org list JSON into connected OrgInfo records.

    Raises OrgDiscoveryError for unparseable JSON, a non-zero status in the
    payload, or records that don't look like orgs.
    """
    try:
        data = json.loads(output)
    except json.JSONDecodeError as e:
        raise OrgDiscoveryError(f"Org list output is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise OrgDiscoveryError("Org list output is not a JSON object")
    if data.get("status", 0) != 0:
        message = data.get("message") or data.get("name") or "unknown error"
        raise OrgDiscoveryError(f"Org list command reported an error: {message}")

    raw_orgs = (data.get("result") or {}).get("nonScratchOrgs") or []
    try:
        orgs = [OrgInfo.model_validate(raw) for raw in raw_orgs]
    except ValidationError as e:
        raise OrgDiscoveryError(f"Unexpected org record in org list output: {e}") from e
    connected = [o for o in orgs if o.is_connected]
    logger.debug("Parsed %d orgs, %d connected", len(orgs), len(connected))
    return connected


def discover_orgs() -> list[OrgInfo]:
    """Return all connected, non-scratch orgs known to the org CLI."""
    settings = get_settings()
    if not is_tool_installed(settings.org_cli_executable):
        raise OrgDiscoveryError(
            f"'{settings.org_cli_executable}' executable not found in your environment"
        )
    cmd = shlex.split(settings.org_list_command)
    logger.debug("Running %s", cmd)
    try:
        result = subprocess.run(
            cmd, capture_output=True, text=True, timeout=settings.org_list_timeout,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired) as e:
        raise OrgDiscoveryError(f"Could not run '{settings.org_list_command}': {e}") from e

    # The CLI reports errors as JSON on stdout with a non-zero exit
    output = result.stdout.strip()
    if not output:
        raise OrgDiscoveryError(
            f"'{settings.org_list_command}' exited with code {result.returncode}: "
            f"{result.stderr.strip()}"
        )
    return parse_org_list(output)


def identify_hub_orgs(orgs: list[OrgInfo]) -> list[OrgInfo]:
    """Orgs that can provision other orgs."""
    return [o for o in orgs if o.is_dev_hub and o.is_connected]


def identify_env_hub_orgs(orgs: list[OrgInfo]) -> list[OrgInfo]:
    """Any connected org can serve as an environment hub."""
    return [o for o in orgs if o.is_connected]


def build_org_map(orgs: list[OrgInfo]) -> dict[str, OrgInfo]:
    """Index orgs by both alias and username."""
    org_map: dict[str, OrgInfo] = {}
    for org in orgs:
        org_map[org.username] = org
        org_map.setdefault(org.alias, org)
    return org_map
