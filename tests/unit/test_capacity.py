"""
Unit tests for capacity accounting
"""

import pytest

from src.services.stego_codec.core.capacity import HEADER_BITS, capacity_for, compute_capacity


class TestComputeCapacity:
    """Test cases for compute_capacity."""

    def test_ten_by_ten_rgb(self):
        report = compute_capacity(10, 10, 3)

        assert report.total_bits == 300
        assert report.header_bits == 72
        assert report.available_payload_bytes == 28

    def test_alpha_channel_excluded(self):
        assert compute_capacity(10, 10, 4) == compute_capacity(10, 10, 3)

    def test_header_bits_constant(self):
        assert HEADER_BITS == 72

    def test_too_small_for_header(self):
        report = compute_capacity(4, 4, 3)  # 48 bits

        assert report.total_bits == 48
        assert report.available_payload_bytes == 0

    def test_exactly_header_sized(self):
        report = compute_capacity(24, 1, 3)  # 72 bits

        assert report.available_payload_bytes == 0

    @pytest.mark.parametrize("width,height,channels", [(1, 1, 3), (7, 13, 3), (100, 100, 4), (640, 480, 3)])
    def test_formula(self, width, height, channels):
        report = compute_capacity(width, height, channels)
        expected = max(0, (width * height * min(channels, 3) - 72) // 8)

        assert report.available_payload_bytes == expected

    def test_query_interface(self):
        report = compute_capacity(10, 10, 3)

        assert report.total_capacity_bytes == 37
        assert report.available_bytes == 28
        assert report.header_overhead_bytes == 9


class TestCapacityFor:
    """Test cases for capacity_for."""

    def test_uses_buffer_geometry(self, rgba_buffer):
        report = capacity_for(rgba_buffer)

        assert report.total_bits == 40 * 30 * 3
