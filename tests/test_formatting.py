import pytest

from film_cli.utils.formatting import (
    format_bytes,
    format_download_date,
    format_duration,
    format_progress_status,
)


@pytest.mark.parametrize(
    "num_bytes, expected",
    [
        (0, "0 Bytes"),
        (1, "1 Bytes"),
        (1023, "1023 Bytes"),
        (1024, "1 KB"),
        (1536, "1.5 KB"),
        (2048, "2 KB"),
        (1048576, "1 MB"),
        (1288490189, "1.2 GB"),
        (1024**4, "1 TB"),
    ],
)
def test_format_bytes_known_values(num_bytes, expected):
    assert format_bytes(num_bytes) == expected


@pytest.mark.parametrize("decimals", [0, 1, 2, 3])
@pytest.mark.parametrize(
    "num_bytes", [5, 999, 1500, 123456, 7654321, 987654321, 12345678901, 2**41 + 7]
)
def test_format_bytes_prefix_is_within_rounding_of_scaled_value(num_bytes, decimals):
    value, unit = format_bytes(num_bytes, decimals).split(" ")
    k = ["Bytes", "KB", "MB", "GB", "TB"].index(unit)

    assert 1 <= num_bytes / 1024**k < 1024
    assert abs(float(value) - num_bytes / 1024**k) <= 10**-decimals


def test_format_bytes_negative_decimals_behave_like_zero():
    assert format_bytes(1536, decimals=-3) == format_bytes(1536, decimals=0) == "2 KB"


def test_format_bytes_beyond_terabytes_stays_in_terabytes():
    assert format_bytes(1024**5) == "1024 TB"


def test_format_bytes_rejects_negative_counts():
    with pytest.raises(ValueError):
        format_bytes(-1)


def test_format_download_date_reads_iso_timestamps():
    assert format_download_date("2024-03-05T10:20:30") == "2024-03-05"
    assert format_download_date("not a date") == "not a date"


def test_format_progress_status_with_and_without_total():
    assert format_progress_status(1024, 2048) == "Downloading: 50% (1 KB/2 KB)"
    assert format_progress_status(1024, None) == "Downloading: 1 KB"


def test_format_duration():
    assert format_duration(0) == "0s"
    assert format_duration(3725) == "1h 2m 5s"
