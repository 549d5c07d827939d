"""
Credential negotiation for pushes.

The transport calls back once per authentication challenge. Each method
(ssh key, credential helper, default) gets exactly one shot per push, so a
rejected credential can never be offered again in a loop.
"""

import logging
import os
import subprocess
from pathlib import Path
from typing import Callable

import pygit2
from pygit2.enums import CredentialType

from eureka.errors import AllAuthMethodsExhausted, AuthenticationError, MissingUsername

logger = logging.getLogger(__name__)

# Generous: helpers may pop up a GUI prompt
CREDENTIAL_HELPER_TIMEOUT = 60

Credential = pygit2.Keypair | pygit2.UserPass | pygit2.KeypairFromAgent
CredentialHelper = Callable[[str, str | None], pygit2.UserPass]


def credential_helper_fill(
    url: str, username: str | None, cwd: Path | None = None
) -> pygit2.UserPass:
    """
    Ask git's configured credential helper for a username/password.

    Runs `git credential fill` inside the repository so its local
    `credential.helper` settings apply. Terminal prompting is disabled:
    either a helper answers or this fails.
    """
    request = f"url={url}\n"
    if username:
        request += f"username={username}\n"
    request += "\n"

    env = {**os.environ, "GIT_TERMINAL_PROMPT": "0"}

    try:
        result = subprocess.run(
            ["git", "credential", "fill"],
            input=request,
            capture_output=True,
            text=True,
            cwd=cwd,
            env=env,
            timeout=CREDENTIAL_HELPER_TIMEOUT,
            check=True,
        )
    except (OSError, subprocess.CalledProcessError, subprocess.TimeoutExpired) as e:
        raise AuthenticationError(f"Credential helper failed for {url}: {e}") from e

    fields: dict[str, str] = {}
    for line in result.stdout.splitlines():
        key, sep, value = line.partition("=")
        if sep:
            fields[key] = value

    if "password" not in fields:
        raise AuthenticationError(f"Credential helper returned no password for {url}")

    return pygit2.UserPass(fields.get("username", username or ""), fields["password"])


class CredentialNegotiator:
    """
    One-shot-per-method credential fallback for a single push.

    Create a new instance for every push; the tried-flags are never reset.
    """

    def __init__(
        self,
        ssh_key: str | Path,
        credential_helper: CredentialHelper | None = None,
    ):
        self.ssh_key = Path(ssh_key).expanduser()
        self.credential_helper = credential_helper or credential_helper_fill
        self.ssh_key_tried = False
        self.credential_helper_tried = False
        self.default_tried = False

    def negotiate(
        self, url: str, username: str | None, allowed_types: CredentialType
    ) -> Credential:
        """Answer one authentication challenge from the transport."""
        if allowed_types & CredentialType.USERNAME and not username:
            raise MissingUsername(f"No username specified in remote URL: {url}")

        if allowed_types & CredentialType.SSH_KEY and not self.ssh_key_tried:
            self.ssh_key_tried = True
            logger.info("Trying ssh key %s for %s", self.ssh_key, url)
            return pygit2.Keypair(username, None, str(self.ssh_key), None)

        if allowed_types & CredentialType.USERPASS_PLAINTEXT and not self.credential_helper_tried:
            self.credential_helper_tried = True
            logger.info("Trying credential helper for %s", url)
            return self.credential_helper(url, username)

        if allowed_types & CredentialType.DEFAULT and not self.default_tried:
            self.default_tried = True
            logger.info("Trying default credentials for %s", url)
            return self._default_credential(username, allowed_types)

        raise AllAuthMethodsExhausted(f"No authentication method succeeded for {url}")

    def _default_credential(
        self, username: str | None, allowed_types: CredentialType
    ) -> Credential:
        """
        Fall back to whatever key the running ssh-agent holds.

        libgit2's own default credential (HTTP Negotiate/NTLM) has no pygit2
        counterpart, so a challenge that doesn't also accept ssh keys fails.
        """
        if not allowed_types & CredentialType.SSH_KEY:
            raise AuthenticationError("pygit2 cannot produce libgit2 default credentials")
        if not username:
            raise AuthenticationError("Default credentials need a username")
        return pygit2.KeypairFromAgent(username)


class PushCallbacks(pygit2.RemoteCallbacks):
    """Remote callbacks that route credential challenges to a negotiator."""

    def __init__(self, negotiator: CredentialNegotiator):
        super().__init__()
        self.negotiator = negotiator
        self.rejected: dict[str, str] = {}

    def credentials(self, url, username_from_url, allowed_types):
        return self.negotiator.negotiate(url, username_from_url, allowed_types)

    def push_update_reference(self, refname, message):
        # message is None when the remote accepted the update
        if message:
            self.rejected[refname] = message
