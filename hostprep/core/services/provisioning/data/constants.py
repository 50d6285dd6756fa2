"""
L0 Data — Module-level constants.

Pure data. No logic. No imports beyond stdlib.
"""

from __future__ import annotations

OS_RELEASE_PATH = "/etc/os-release"
LSB_RELEASE_PATH = "/etc/lsb-release"

# Known distribution families and their downstream variants.
# A family key can itself be listed as a variant (``ubuntu`` belongs to
# ``debian`` and is the base of its own flavours); such a key resolves
# to the family that lists it.
DISTRO_FAMILIES: dict[str, list[str]] = {
    "arch": [
        "endeavouros", "manjaro", "artix", "garuda", "blackarch",
        "archbang", "archcraft", "arcolinux",
    ],
    "debian": [
        "ubuntu", "elementary", "zorin", "kali", "parrot", "mx",
        "deepin", "devuan",
    ],
    "ubuntu": [
        "kubuntu", "xubuntu", "lubuntu", "pop-os", "ubuntu-mate",
        "linuxmint", "ubuntu-budgie", "ubuntu-studio", "edubuntu",
        "mythbuntu",
    ],
    "fedora": ["nobara"],
    "rhel": ["almalinux", "rocky", "oracle", "centos"],
    "suse": ["opensuse", "opensuse-leap", "opensuse-tumbleweed"],
    "gentoo": ["funtoo", "chromeos"],
    "slackware": ["slax", "zenwalk", "vector"],
    "void": ["void-live"],
    "alpine": ["postmarketos"],
}

# os-release ID / ID_LIKE token → preferred provider.
# Arch-family hosts are deliberately absent: they go through the
# AUR-helper preference list instead.
DISTRO_DEFAULT_PROVIDERS: dict[str, str] = {
    "debian": "apt",
    "ubuntu": "apt",
    "linuxmint": "apt",
    "pop-os": "apt",
    "fedora": "dnf",
    "rhel": "dnf",
    "centos": "dnf",
    "rocky": "dnf",
    "almalinux": "dnf",
    "suse": "zypper",
    "opensuse": "zypper",
    "opensuse-leap": "zypper",
    "opensuse-tumbleweed": "zypper",
    "alpine": "apk",
    "gentoo": "emerge",
    "void": "xbps",
}

# Preference order when the os-release lookup picks nothing.
AUR_HELPERS: tuple[str, ...] = ("paru", "yay", "trizen", "aura", "pamac")
ARCH_BASE_PROVIDER = "pacman"
DARWIN_PREFERENCE: tuple[str, ...] = ("brew", "macports")
WINDOWS_PREFERENCE: tuple[str, ...] = ("winget", "chocolatey", "scoop")

# Extra PATH entries, highest precedence first.  Entries that do not
# exist on the host are skipped when the PATH is assembled.
UNIX_COMMON_PATHS: tuple[str, ...] = (
    # System paths
    "/usr/bin",
    "/bin",
    "/usr/sbin",
    "/sbin",
    "/usr/local/bin",
    "/usr/local/sbin",
    # User local binaries
    "~/.local/bin",
    # Language-specific user paths
    "~/.cargo/bin",
    "~/go/bin",
    # System-wide language paths
    "/usr/local/go/bin",
    "/usr/local/cargo/bin",
    # Third-party package managers (lowest precedence)
    "/nix/var/nix/profiles/default/bin",
    "/snap/bin",
    "/var/lib/flatpak/exports/bin",
    "/opt/homebrew/bin",
    "/opt/homebrew/sbin",
    "/home/linuxbrew/.linuxbrew/bin",
    "/home/linuxbrew/.linuxbrew/sbin",
)

WINDOWS_COMMON_PATHS: tuple[str, ...] = (
    "%USERPROFILE%\\AppData\\Local\\Microsoft\\WindowsApps",
    "%USERPROFILE%\\scoop\\shims",
    "%PROGRAMFILES%\\Git\\bin",
    "%PROGRAMFILES%\\Go\\bin",
    "%PROGRAMFILES%\\nodejs",
    "%PROGRAMFILES%\\Rust\\.cargo\\bin",
)

# User definition directories, searched in order; the first that
# exists is loaded.
PROVIDER_SEARCH_DIRS: tuple[str, ...] = (
    "/usr/local/share/hostprep/providers",
    "/usr/share/hostprep/providers",
    "~/.config/hostprep/providers",
)

DARWIN_PROVIDER_SEARCH_DIRS: tuple[str, ...] = (
    "/opt/homebrew/share/hostprep/providers",
    "/usr/local/Cellar/hostprep/providers",
)

# Architecture name normalization (Go/Docker style).
ARCH_MAP: dict[str, str] = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv7l": "armhf",
    "i686": "i386",
    "i386": "i386",
}
