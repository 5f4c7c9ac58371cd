"""Tests for media resource acquisition and release."""

from pathlib import Path

from keyframer.sources.media import MediaResource, acquire_media


class TestAcquireMedia:
    def test_path_is_borrowed(self, tmp_path):
        video = tmp_path / "clip.mp4"
        video.write_bytes(b"not really a video")

        resource = acquire_media(video)
        assert resource.uri == str(video)
        assert not resource.owned

        resource.release()
        assert resource.released
        assert video.exists()  # caller's file is never deleted

    def test_bytes_are_spooled_and_deleted(self):
        resource = acquire_media(b"\x00\x01\x02", suffix=".avi")
        path = Path(resource.uri)
        assert resource.owned
        assert path.suffix == ".avi"
        assert path.read_bytes() == b"\x00\x01\x02"

        resource.release()
        assert not path.exists()

    def test_release_is_idempotent(self):
        resource = acquire_media(b"data")
        resource.release()
        resource.release()
        assert resource.released

    def test_existing_resource_passes_through(self):
        resource = MediaResource("memory:clip")
        assert acquire_media(resource) is resource

    def test_context_manager_releases(self):
        with acquire_media(b"data") as resource:
            path = Path(resource.uri)
            assert path.exists()
        assert resource.released
        assert not path.exists()
