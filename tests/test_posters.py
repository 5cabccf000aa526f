"""
Tests for poster keys, compression and storage cleanup
"""

import io

import pytest
from PIL import Image

from app.core.exceptions import PosterProcessingError
from app.schemas.event import EventRecord
from app.services.poster_service import (
    PosterService,
    PosterUpload,
    compress_image,
    make_resized_variant,
    poster_path_for,
)
from app.services.poster_storage import LocalPosterStorage
from app.utils.posters import extract_poster_path, get_resized_image_path

from conftest import MemoryPosterStorage, make_image


def test_resized_path_replaces_extension():
    assert get_resized_image_path("posters/123_photo.png") == "posters/123_photo_750x1080.webp"


def test_resized_path_without_extension_appends_suffix():
    assert get_resized_image_path("posters/123_photo") == "posters/123_photo_750x1080.webp"


def test_resized_path_empty():
    assert get_resized_image_path("") == ""


def test_resized_path_applied_twice_is_well_defined():
    once = get_resized_image_path("posters/123_photo.png")
    twice = get_resized_image_path(once)
    assert twice == "posters/123_photo_750x1080_750x1080.webp"


def test_resized_path_custom_suffix():
    assert get_resized_image_path("a/b.jpeg", suffix="_640x853.webp") == "a/b_640x853.webp"


def test_extract_prefers_explicit_path():
    record = EventRecord(
        poster_path="posters/1_a.png",
        poster_url="https://firebasestorage.googleapis.com/v0/b/x/o/posters%2F2_b.png?alt=media",
    )
    assert extract_poster_path(record) == "posters/1_a.png"


def test_extract_from_download_url():
    record = EventRecord(
        poster_url="https://firebasestorage.googleapis.com/v0/b/x.appspot.com/o/posters%2F1699_plak%C3%A1t.jpg?alt=media&token=abc"
    )
    assert extract_poster_path(record) == "posters/1699_plakát.jpg"


def test_extract_accepts_camel_case_documents():
    assert extract_poster_path({"posterPath": "posters/9_x.png"}) == "posters/9_x.png"


def test_extract_returns_none_without_source():
    assert extract_poster_path(EventRecord()) is None
    assert extract_poster_path(EventRecord(poster_url="not a url")) is None
    assert extract_poster_path(EventRecord(poster_url="https://example.com/images/a.png")) is None


def test_poster_path_keeps_only_file_name():
    assert poster_path_for("plakat.png", now_ms=1700000000000) == "posters/1700000000000_plakat.png"
    assert poster_path_for("../../etc/passwd", now_ms=1) == "posters/1_passwd"
    assert poster_path_for("C:\\Users\\me\\a.jpg", now_ms=1) == "posters/1_a.jpg"


def test_compress_limits_dimensions():
    data, content_type = compress_image(make_image((4000, 3000), "JPEG"), max_width_or_height=1920)
    image = Image.open(io.BytesIO(data))
    assert max(image.size) == 1920
    assert content_type == "image/jpeg"


def test_compress_keeps_png():
    _, content_type = compress_image(make_image((300, 300), "PNG"))
    assert content_type == "image/png"


def test_compress_rejects_non_images():
    with pytest.raises(PosterProcessingError):
        compress_image(b"definitely not an image")


def test_resized_variant_fits_bounds():
    data = make_resized_variant(make_image((1500, 3000), "PNG"))
    image = Image.open(io.BytesIO(data))
    assert image.format == "WEBP"
    assert image.width <= 750 and image.height <= 1080


def test_attach_uploads_both_variants():
    storage = MemoryPosterStorage()
    fields = PosterService(storage).attach(PosterUpload("plakat.png", make_image(), "image/png"))

    assert fields["poster_path"].startswith("posters/")
    assert fields["resized_poster_path"] == get_resized_image_path(fields["poster_path"])
    assert set(storage.blobs) == {fields["poster_path"], fields["resized_poster_path"]}
    assert storage.blobs[fields["resized_poster_path"]][1] == "image/webp"
    assert extract_poster_path(EventRecord(poster_url=fields["poster_url"])) == fields["poster_path"]


def test_delete_files_removes_both_variants():
    storage = MemoryPosterStorage()
    service = PosterService(storage)
    fields = service.attach(PosterUpload("plakat.png", make_image(), "image/png"))

    service.delete_files(EventRecord(**fields))
    assert storage.blobs == {}


def test_delete_files_tolerates_storage_failures():
    storage = MemoryPosterStorage(fail_deletes=True)
    # Must not raise
    PosterService(storage).delete_files(EventRecord(poster_path="posters/1_a.png"))


def test_delete_files_without_poster_is_noop():
    storage = MemoryPosterStorage(fail_deletes=True)
    PosterService(storage).delete_files(EventRecord())


def test_local_storage_round_trip(tmp_path):
    storage = LocalPosterStorage(root=str(tmp_path), base_url="http://localhost:8000")
    url = storage.upload("posters/1_a.png", b"abc", "image/png")

    assert url == "http://localhost:8000/storage/o/posters%2F1_a.png"
    assert (tmp_path / "posters" / "1_a.png").read_bytes() == b"abc"
    assert extract_poster_path(EventRecord(poster_url=url)) == "posters/1_a.png"

    storage.delete("posters/1_a.png")
    assert not (tmp_path / "posters" / "1_a.png").exists()


def test_local_storage_rejects_escaping_keys(tmp_path):
    storage = LocalPosterStorage(root=str(tmp_path))
    with pytest.raises(ValueError):
        storage.resolve("../outside.png")
