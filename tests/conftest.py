"""Pytest configuration and shared fixtures.

This module contains sample package-manager output used across test modules.
"""

from unittest.mock import MagicMock

import pytest
from pkgbridge.core.config import BridgeConfig
from pkgbridge.core.detector import BackendDetector
from pkgbridge.core.executor import PrivilegedExecutor
from pkgbridge.core.session import Session
from pkgbridge.models.package import BackendKind


@pytest.fixture
def apt_search_output() -> str:
    """Sample apt-cache search output."""
    return """htop - interactive processes viewer
btop - Modern and colorful command line resource monitor that shows usage and stats
vim - Vi IMproved - enhanced vi editor
"""


@pytest.fixture
def apt_installed_output() -> str:
    """Sample apt list --installed output."""
    return """Listing... Done
adduser/jammy,now 3.118ubuntu5 all [installed,automatic]
vim/jammy-updates,now 2:8.2.3995-1ubuntu2.15 amd64 [installed]
python3.11/jammy,now 3.11.0~rc1-1~22.04 amd64 [installed]
libc6/jammy,now 2.35-0ubuntu3.6 i386 [installed,upgradable to: 2.35-0ubuntu3.7]
"""


@pytest.fixture
def dnf4_search_output() -> str:
    """Sample dnf 4 search output."""
    return """Last metadata expiration check: 0:12:03 ago on Mon 01 Jan 2026 10:00:00 AM UTC.
========================= Name Exactly Matched: htop =========================
htop.x86_64 : Interactive process viewer
====================== Name & Summary Matched: htop ======================
htop-debuginfo.x86_64 : Debug information for package htop
python3.11-htop-helper.noarch : Helper scripts for htop
"""


@pytest.fixture
def dnf5_search_output() -> str:
    """Sample dnf 5 search output."""
    return """Updating and loading repositories:
Repositories loaded.
Matched fields: name (exact)
 htop.x86_64\tInteractive process viewer
Matched fields: name, summary
 htop-debuginfo.x86_64\tDebug information for package htop
"""


@pytest.fixture
def dnf_installed_output() -> str:
    """Sample dnf list --installed output, including a wrapped row."""
    return """Installed Packages
bash.x86_64                                5.2.26-3.fc40                @fedora
glibc-langpack-en.x86_64                   2.39-22.fc40                 @updates
python3-setuptools-wheel-extra-long-name.noarch
                                           69.0.3-4.fc40                @fedora
vim-enhanced.x86_64                        2:9.1.393-1.fc40             @updates
"""


@pytest.fixture
def pacman_search_output() -> str:
    """Sample pacman -Ss output."""
    return """extra/htop 3.3.0-3 [installed]
    Interactive process viewer
extra/btop 1.3.2-1
    A monitor of system resources, bpytop ported to C++
"""


@pytest.fixture
def pacman_installed_output() -> str:
    """Sample pacman -Q output."""
    return """bash 5.2.026-2
htop 3.3.0-3
linux 6.9.7.arch1-1
"""


@pytest.fixture
def bridge_config() -> BridgeConfig:
    """Configuration without history recording."""
    return BridgeConfig(record_history=False)


@pytest.fixture
def mock_executor() -> MagicMock:
    """Executor double; configure run/run_privileged per test."""
    return MagicMock(spec=PrivilegedExecutor)


@pytest.fixture
def apt_session(bridge_config: BridgeConfig, mock_executor: MagicMock) -> Session:
    """Session pinned to apt with a mocked executor and detection."""
    detector = MagicMock(spec=BackendDetector)
    detector.require.return_value = BackendKind.APT
    detector.detect.return_value = BackendKind.APT
    return Session(bridge_config, detector=detector, executor=mock_executor)
