"""Tests for cdr.platform.detection module."""

from __future__ import annotations

from cdr.platform.detection import Arch, Platform, PlatformInfo, detect


class TestSdkNames:
    def test_platform_names(self) -> None:
        assert Platform.LINUX.sdk_name == "linux"
        assert Platform.MACOS.sdk_name == "darwin"
        assert Platform.WINDOWS.sdk_name == "windows"

    def test_archive_ext(self) -> None:
        assert Platform.LINUX.archive_ext == "tar.gz"
        assert Platform.WINDOWS.archive_ext == "zip"

    def test_arch_names(self) -> None:
        assert Arch.X64.sdk_name == "x86_64"
        assert Arch.ARM64.sdk_name == "arm"
        assert Arch.X86.sdk_name == "x86"


def test_platform_info_str() -> None:
    assert str(PlatformInfo(platform=Platform.LINUX, arch=Arch.X64)) == "linux-x64"


def test_detect_is_cached() -> None:
    assert detect() is detect()
