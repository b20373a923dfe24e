# cmdguard/context/environment.py
"""
Environment snapshot for cmdguard.

Detects the operating system, the user's shell and the system package
manager once per invocation. The result only feeds descriptive text; the
classifier and the backup store never branch on it.
"""
import json
import os
import platform
import shutil
from enum import Enum
from pathlib import Path
from typing import Callable, Mapping, Optional

from pydantic import BaseModel, ConfigDict

from cmdguard.utils.logging import get_logger

logger = get_logger(__name__)


class OSKind(str, Enum):
    MACOS = "macos"
    LINUX = "linux"
    WINDOWS = "windows"
    WSL = "wsl"
    UNKNOWN = "unknown"


class ShellKind(str, Enum):
    BASH = "bash"
    ZSH = "zsh"
    FISH = "fish"
    POWERSHELL = "powershell"
    CMD = "cmd"
    MSYS = "msys"
    UNKNOWN = "unknown"


class PackageManager(str, Enum):
    BREW = "brew"
    APT = "apt"
    PACMAN = "pacman"
    NIX = "nix"
    CHOCO = "choco"
    SCOOP = "scoop"
    WINGET = "winget"
    UNKNOWN = "unknown"


class EnvProfile(BaseModel):
    """Read-only snapshot of the user's environment."""
    model_config = ConfigDict(frozen=True)

    os: OSKind = OSKind.UNKNOWN
    shell: ShellKind = ShellKind.UNKNOWN
    pkg: PackageManager = PackageManager.UNKNOWN

    def summary(self) -> str:
        """One-line description for annotation text."""
        return f"OS: {self.os.value}, Shell: {self.shell.value}, Package manager: {self.pkg.value}"

    def to_prompt_context(self) -> str:
        """Render the environment as a JSON block for an assistant prompt."""
        body = json.dumps(
            {"os": self.os.value, "shell": self.shell.value, "package_manager": self.pkg.value},
            indent=2,
        )
        return f"<user_environment>\n{body}\n</user_environment>"


def _read_text(path: str) -> str:
    try:
        return Path(path).read_text(errors="replace")
    except OSError:
        return ""


def detect_os(system: Optional[str] = None, read_file: Callable[[str], str] = _read_text) -> OSKind:
    """Map the platform name to an OSKind, recognizing WSL kernels."""
    system = (system if system is not None else platform.system()).lower()
    if system == "darwin":
        return OSKind.MACOS
    if system == "linux":
        if "microsoft" in read_file("/proc/version").lower():
            return OSKind.WSL
        return OSKind.LINUX
    if system == "windows":
        return OSKind.WINDOWS
    return OSKind.UNKNOWN


def _shell_from_name(name: str) -> ShellKind:
    name = name.lower()
    for kind in (ShellKind.BASH, ShellKind.ZSH, ShellKind.FISH):
        if kind.value in name:
            return kind
    return ShellKind.UNKNOWN


def detect_shell(
    os_kind: OSKind,
    environ: Mapping[str, str],
    read_file: Callable[[str], str] = _read_text,
) -> ShellKind:
    """Work out the user's shell from environment variables."""
    if os_kind == OSKind.WINDOWS:
        if "PSModulePath" in environ:
            return ShellKind.POWERSHELL
        if "MSYSTEM" in environ or "MINGW_PREFIX" in environ:
            return ShellKind.MSYS
        if environ.get("ComSpec", "").lower().endswith("cmd.exe"):
            return ShellKind.CMD
        return ShellKind.UNKNOWN

    if os_kind in (OSKind.LINUX, OSKind.WSL, OSKind.MACOS):
        shell = _shell_from_name(environ.get("SHELL", ""))
        if shell != ShellKind.UNKNOWN:
            return shell
        if os_kind in (OSKind.LINUX, OSKind.WSL):
            return _shell_from_name(read_file("/proc/self/comm").strip())

    return ShellKind.UNKNOWN


def detect_package_manager(
    os_kind: OSKind,
    which: Callable[[str], Optional[str]] = shutil.which,
    read_file: Callable[[str], str] = _read_text,
) -> PackageManager:
    """Find the system package manager for the given OS."""
    if os_kind == OSKind.MACOS:
        if which("brew"):
            return PackageManager.BREW

    elif os_kind in (OSKind.LINUX, OSKind.WSL):
        release = read_file("/etc/os-release").lower()
        if "arch" in release:
            return PackageManager.PACMAN
        if "ubuntu" in release or "debian" in release:
            return PackageManager.APT
        if "nixos" in release:
            return PackageManager.NIX

        for binary, manager in (("apt-get", PackageManager.APT),
                                ("pacman", PackageManager.PACMAN),
                                ("nix", PackageManager.NIX)):
            if which(binary):
                return manager

    elif os_kind == OSKind.WINDOWS:
        for binary, manager in (("choco", PackageManager.CHOCO),
                                ("scoop", PackageManager.SCOOP),
                                ("winget", PackageManager.WINGET)):
            if which(binary):
                return manager

    return PackageManager.UNKNOWN


def detect_environment(
    environ: Optional[Mapping[str, str]] = None,
    system: Optional[str] = None,
    which: Callable[[str], Optional[str]] = shutil.which,
    read_file: Callable[[str], str] = _read_text,
) -> EnvProfile:
    """
    Detect the current environment.

    Every source of information can be injected so detection is testable
    without touching the real system.
    """
    environ = os.environ if environ is None else environ
    os_kind = detect_os(system, read_file)
    profile = EnvProfile(
        os=os_kind,
        shell=detect_shell(os_kind, environ, read_file),
        pkg=detect_package_manager(os_kind, which, read_file),
    )
    logger.debug(f"Detected environment: {profile.summary()}")
    return profile
