"""Databricks client construction for tabledef commands."""

import os
from pathlib import Path
from typing import Optional

from databricks.sdk import WorkspaceClient

from tabledef.domain.errors import AuthenticationError

DATABRICKS_CONFIG_FILE = Path("~/.databrickscfg")


def create_workspace_client(profile: Optional[str] = None) -> WorkspaceClient:
    """Build a WorkspaceClient and verify it with a ``current_user.me()`` call

    Without ``profile`` the SDK's default credential chain applies
    (DATABRICKS_HOST / DATABRICKS_TOKEN, then the DEFAULT profile).

    Raises:
        AuthenticationError: If the client cannot be created or verified
    """
    try:
        client = WorkspaceClient(profile=profile) if profile else WorkspaceClient()
        client.current_user.me()
    except Exception as e:
        raise AuthenticationError(_format_auth_error(e, profile)) from e
    return client


def check_profile_exists(profile: str) -> bool:
    config_file = DATABRICKS_CONFIG_FILE.expanduser()
    try:
        return f"[{profile}]" in config_file.read_text(encoding="utf-8")
    except OSError:
        return False


def _format_auth_error(error: Exception, profile: Optional[str]) -> str:
    lines = [f"Failed to authenticate with Databricks (profile: {profile or 'default chain'})"]

    if profile and not check_profile_exists(profile):
        lines += [
            "",
            f"Profile '{profile}' not found in {DATABRICKS_CONFIG_FILE}",
            f"Create it with: databricks configure --profile {profile}",
        ]
    elif not profile:
        env_configured = bool(os.getenv("DATABRICKS_HOST") and os.getenv("DATABRICKS_TOKEN"))
        if not env_configured and not check_profile_exists("DEFAULT"):
            lines += [
                "",
                "No authentication configured. Set DATABRICKS_HOST and DATABRICKS_TOKEN,",
                f"or add a DEFAULT profile to {DATABRICKS_CONFIG_FILE}, or set 'profile'",
                "in tabledef.yaml.",
            ]

    lines += ["", f"Error details: {error}"]
    return "\n".join(lines)
