"""Unit tests for BackendDetector."""

from unittest.mock import patch

import pytest
from pkgbridge.core.detector import DETECTION_ORDER, BackendDetector
from pkgbridge.core.errors import NoBackendFoundError
from pkgbridge.models.package import BackendKind


def _present(*executables: str):
    return lambda cmd: cmd in executables


class TestBackendDetector:
    """Tests for detection order and pinning."""

    def test_order(self) -> None:
        """apt is probed first, then dnf, then pacman."""
        assert DETECTION_ORDER == (BackendKind.APT, BackendKind.DNF, BackendKind.PACMAN)

    @pytest.mark.parametrize(
        ("present", "expected"),
        [
            (("apt-get", "dnf", "pacman"), BackendKind.APT),
            (("dnf", "pacman"), BackendKind.DNF),
            (("pacman",), BackendKind.PACMAN),
        ],
    )
    def test_first_present_wins(self, present: tuple[str, ...], expected: BackendKind) -> None:
        """The first backend in priority order that exists is chosen."""
        with patch("pkgbridge.backends.base.command_exists", side_effect=_present(*present)):
            assert BackendDetector().detect() == expected

    def test_none_present(self) -> None:
        """No supported package manager yields None."""
        with patch("pkgbridge.backends.base.command_exists", return_value=False):
            assert BackendDetector().detect() is None

    def test_require_raises(self) -> None:
        """require raises NoBackendFoundError when nothing is found."""
        with patch("pkgbridge.backends.base.command_exists", return_value=False):
            with pytest.raises(NoBackendFoundError):
                BackendDetector().require()

    def test_pinned_backend(self) -> None:
        """A pinned backend skips the priority order."""
        with patch("pkgbridge.backends.base.command_exists", side_effect=_present("apt-get", "pacman")):
            assert BackendDetector(pinned=BackendKind.PACMAN).detect() == BackendKind.PACMAN

    def test_pinned_backend_missing(self) -> None:
        """A pinned backend that is absent is reported by name."""
        with patch("pkgbridge.backends.base.command_exists", side_effect=_present("apt-get")):
            with pytest.raises(NoBackendFoundError, match="dnf"):
                BackendDetector(pinned=BackendKind.DNF).require()

    def test_detection_spawns_no_process(self) -> None:
        """Probing only consults PATH."""
        with (
            patch("pkgbridge.backends.base.command_exists", return_value=False),
            patch("subprocess.Popen") as mock_popen,
        ):
            BackendDetector().detect()
        mock_popen.assert_not_called()
