from unittest.mock import MagicMock, patch

from storage_utils import SIGNED_URL_EXPIRY, BucketStorage, public_url


def test_public_url_encodes_path_as_one_component():
    assert public_url("my-bucket", "videos/c1/m1/17 00.mp4") == (
        "https://storage.googleapis.com/my-bucket/videos%2Fc1%2Fm1%2F17%2000.mp4"
    )


def test_public_url_keeps_uri_component_safe_characters():
    assert public_url("b", "videos/a/b/it's(1)!.mp4") == (
        "https://storage.googleapis.com/b/videos%2Fa%2Fb%2Fit's(1)!.mp4"
    )


def test_make_public_grants_read_and_returns_url():
    app = MagicMock()
    blob = MagicMock()

    with patch("storage_utils.storage.bucket") as bucket:
        bucket.return_value.blob.return_value = blob
        url = BucketStorage(app=app).make_public("b", "videos/c/m/1.mp4")

    bucket.assert_called_once_with("b", app=app)
    bucket.return_value.blob.assert_called_once_with("videos/c/m/1.mp4")
    blob.make_public.assert_called_once_with()
    assert url == "https://storage.googleapis.com/b/videos%2Fc%2Fm%2F1.mp4"


def test_signed_url_uses_long_lived_expiry():
    blob = MagicMock()
    blob.generate_signed_url.return_value = "https://signed"

    with patch("storage_utils.storage.bucket") as bucket:
        bucket.return_value.blob.return_value = blob
        assert BucketStorage(app=MagicMock()).signed_url("b", "videos/c/m/1.mp4") == "https://signed"

    blob.generate_signed_url.assert_called_once_with(expiration=SIGNED_URL_EXPIRY, method="GET")
    assert SIGNED_URL_EXPIRY.year == 2500
