"""Tests for the blob store and geocoder clients"""

import re
from unittest.mock import MagicMock

import pytest
import requests

from civictrack.core.config import Settings
from civictrack.errors import UploadError
from civictrack.services.blob_store import BlobStore, make_object_name
from civictrack.services.geocoder import Geocoder, format_coordinates


def response(json_data=None, status_code=200):
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = json_data
    if status_code >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status_code} error")
    return resp


@pytest.fixture
def storage_settings():
    return Settings(
        SUPABASE_URL="https://project.supabase.co/",
        SUPABASE_SERVICE_ROLE_KEY="service-role-key",
        SUPABASE_BUCKET="issue-media",
    )


class TestBlobStore:

    def test_object_name_keeps_extension_only(self):
        name = make_object_name("My Photo.JPG")
        assert re.fullmatch(r"\d{13}-[a-z0-9]{11}\.jpg", name)

    def test_object_name_without_extension(self):
        assert make_object_name("blob").endswith(".bin")

    def test_upload_returns_public_url(self, storage_settings):
        http = MagicMock()
        http.post.return_value = response()
        store = BlobStore(settings=storage_settings, http=http)

        url = store.upload(b"data", "photo.png", "image/png")

        assert url.startswith("https://project.supabase.co/storage/v1/object/public/issue-media/")
        assert url.endswith(".png")
        args, kwargs = http.post.call_args
        assert args[0].startswith("https://project.supabase.co/storage/v1/object/issue-media/")
        assert kwargs["headers"]["Authorization"] == "Bearer service-role-key"
        assert kwargs["headers"]["Content-Type"] == "image/png"
        assert kwargs["data"] == b"data"

    def test_upload_http_error(self, storage_settings):
        http = MagicMock()
        http.post.return_value = response(status_code=500)
        store = BlobStore(settings=storage_settings, http=http)

        with pytest.raises(UploadError, match="photo.png"):
            store.upload(b"data", "photo.png", "image/png")

    def test_upload_connection_error(self, storage_settings):
        http = MagicMock()
        http.post.side_effect = requests.ConnectionError("refused")
        store = BlobStore(settings=storage_settings, http=http)

        with pytest.raises(UploadError):
            store.upload(b"data", "clip.mp4", "video/mp4")

    def test_unconfigured_store_refuses(self):
        store = BlobStore(settings=Settings(SUPABASE_URL=None, SUPABASE_SERVICE_ROLE_KEY=None), http=MagicMock())

        with pytest.raises(UploadError, match="not configured"):
            store.upload(b"data", "photo.png")


class TestGeocoder:

    def test_format_coordinates(self):
        assert format_coordinates(40.7128, -74.006) == "40.712800, -74.006000"

    def test_reverse_geocode(self):
        http = MagicMock()
        http.get.return_value = response({"display_name": "City Hall, Springfield"})
        geocoder = Geocoder(settings=Settings(), http=http)

        assert geocoder.reverse_geocode(40.7128, -74.006) == "City Hall, Springfield"
        _, kwargs = http.get.call_args
        assert kwargs["params"] == {"format": "json", "lat": 40.7128, "lon": -74.006}

    def test_empty_result_falls_back(self):
        http = MagicMock()
        http.get.return_value = response({"error": "Unable to geocode"})
        geocoder = Geocoder(settings=Settings(), http=http)

        assert geocoder.reverse_geocode(1.5, 2.25) == "1.500000, 2.250000"

    def test_http_error_falls_back(self):
        http = MagicMock()
        http.get.return_value = response(status_code=503)
        geocoder = Geocoder(settings=Settings(), http=http)

        assert geocoder.reverse_geocode(1.5, 2.25) == "1.500000, 2.250000"

    def test_timeout_falls_back(self):
        http = MagicMock()
        http.get.side_effect = requests.Timeout("slow")
        geocoder = Geocoder(settings=Settings(), http=http)

        assert geocoder.reverse_geocode(-33.8688, 151.2093) == "-33.868800, 151.209300"

    def test_malformed_json_falls_back(self):
        http = MagicMock()
        resp = response()
        resp.json.side_effect = ValueError("not json")
        http.get.return_value = resp
        geocoder = Geocoder(settings=Settings(), http=http)

        assert geocoder.reverse_geocode(0.0, 0.0) == "0.000000, 0.000000"
