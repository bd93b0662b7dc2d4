"""test suite for the Adoptium repository client."""
import hashlib
import json
import pytest
import shutil
import sys
import tempfile
from pathlib import Path

import httpx

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from jdkcache.domain.errors import (
    InvalidArchitecture,
    InvalidParameter,
    InvalidPlatform,
    InvalidReleaseMetadata,
    NetworkError,
    NoReleaseFound,
)
from jdkcache.registry.adoptium import AdoptiumRepository


ARCHIVE = b"pretend this is a jdk archive"


def release_record(release_name: str, os_name: str = "linux", link: str = "https://github.invalid/jdk.tar.gz"):
    return {
        "binary": {
            "architecture": "x64",
            "image_type": "jdk",
            "os": os_name,
            "package": {
                "checksum": hashlib.sha256(ARCHIVE).hexdigest(),
                "link": link,
                "name": "jdk.tar.gz",
                "size": len(ARCHIVE),
            },
        },
        "release_name": release_name,
        "vendor": "eclipse",
    }


class TestBuildQueryUrl:
    @pytest.fixture
    def repository(self):
        return AdoptiumRepository(client=httpx.Client(transport=httpx.MockTransport(self._no_network)))

    @staticmethod
    def _no_network(request):
        raise AssertionError(f"unexpected request to {request.url}")

    def test_valid_jdk_url(self, repository):
        assert repository.build_query_url(version=8, arch="x64", platform="mac") == (
            "https://api.adoptium.net/v3/assets/latest/8/hotspot"
            "?architecture=x64&image_type=jdk&os=mac&vendor=eclipse"
        )

    def test_default_url(self, repository):
        assert repository.build_query_url() == (
            "https://api.adoptium.net/v3/assets/latest/8/hotspot"
            "?architecture=x64&image_type=jdk&os=windows&vendor=eclipse"
        )

    def test_version_is_not_range_checked(self, repository):
        assert repository.build_query_url(version=-1) == (
            "https://api.adoptium.net/v3/assets/latest/-1/hotspot"
            "?architecture=x64&image_type=jdk&os=windows&vendor=eclipse"
        )

    def test_jre_x86_linux(self, repository):
        assert repository.build_query_url(version=17, arch="x86", image_type="jre", platform="linux") == (
            "https://api.adoptium.net/v3/assets/latest/17/hotspot"
            "?architecture=x86&image_type=jre&os=linux&vendor=eclipse"
        )

    def test_custom_base_url(self):
        repository = AdoptiumRepository("https://mirror.example.org/")
        assert repository.build_query_url(version=21, platform="linux").startswith(
            "https://mirror.example.org/v3/assets/latest/21/hotspot?"
        )

    def test_invalid_architecture(self, repository):
        with pytest.raises(InvalidArchitecture, match="nothing"):
            repository.build_query_url(arch="nothing")

    def test_invalid_platform(self, repository):
        with pytest.raises(InvalidPlatform, match="nothing"):
            repository.build_query_url(platform="nothing")

    def test_invalid_image_type(self, repository):
        with pytest.raises(InvalidParameter, match="image_type"):
            repository.build_query_url(image_type="debugimage")


class TestFetchRelease:
    @pytest.fixture
    def requests(self):
        return []

    def make_repository(self, requests, api_response):
        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            if request.url.host == "api.adoptium.net":
                return api_response
            if request.url.path == "/jdk.tar.gz":
                return httpx.Response(200, content=ARCHIVE)
            return httpx.Response(404)

        return AdoptiumRepository(client=httpx.Client(transport=httpx.MockTransport(handler)))

    def test_first_record_selected(self, requests):
        records = [release_record("jdk8u392-b08"), release_record("jdk8u382-b05")]
        repository = self.make_repository(requests, httpx.Response(200, json=records))

        release = repository.fetch_release(8, "linux", "x64", "jdk")

        assert release.release_name == "jdk8u392-b08"
        assert len(requests) == 1
        assert str(requests[0].url) == repository.build_query_url(version=8, arch="x64", platform="linux")

    def test_release_name_cached_per_major(self, requests):
        repository = self.make_repository(requests, httpx.Response(200, json=[release_record("jdk-17.0.9+9")]))
        assert repository.get_release_name(17) is None
        repository.fetch_release(17, "linux", "x64")
        assert repository.get_release_name(17) == "jdk-17.0.9+9"
        assert repository.get_release_name(8) is None

    def test_empty_answer(self, requests):
        repository = self.make_repository(requests, httpx.Response(200, json=[]))
        with pytest.raises(NoReleaseFound, match="jre 8 on mac/x86") as exc_info:
            repository.fetch_release(8, "mac", "x86", "jre")
        assert exc_info.value.version == 8
        assert repository.get_release_name(8) is None

    def test_http_error_status(self, requests):
        repository = self.make_repository(requests, httpx.Response(500, text="upstream failure"))
        with pytest.raises(NetworkError, match="api.adoptium.net"):
            repository.fetch_release(8, "linux", "x64")

    def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        repository = AdoptiumRepository(client=httpx.Client(transport=httpx.MockTransport(handler)))
        with pytest.raises(NetworkError, match="connection refused"):
            repository.fetch_release(8, "linux", "x64")

    def test_non_json_answer(self, requests):
        repository = self.make_repository(requests, httpx.Response(200, text="<html>maintenance</html>"))
        with pytest.raises(InvalidReleaseMetadata, match="not JSON"):
            repository.fetch_release(8, "linux", "x64")

    def test_non_list_answer(self, requests):
        repository = self.make_repository(requests, httpx.Response(200, json={"errorMessage": "bad"}))
        with pytest.raises(InvalidReleaseMetadata, match="expected a list"):
            repository.fetch_release(8, "linux", "x64")

    def test_malformed_record(self, requests):
        repository = self.make_repository(requests, httpx.Response(200, json=[{"release_name": "x"}]))
        with pytest.raises(InvalidReleaseMetadata):
            repository.fetch_release(8, "linux", "x64")

    def test_invalid_platform_makes_no_request(self, requests):
        repository = self.make_repository(requests, httpx.Response(200, json=[]))
        with pytest.raises(InvalidPlatform):
            repository.fetch_release(8, "solaris", "x64")
        assert requests == []


class TestDownloadRelease:
    @pytest.fixture
    def temp_dir(self):
        temp_dir = Path(tempfile.mkdtemp())
        yield temp_dir
        if temp_dir.exists():
            shutil.rmtree(temp_dir)

    def test_download_release_verifies_and_writes(self, temp_dir):
        record = release_record("jdk8u392-b08")

        def handler(request):
            if request.url.host == "api.adoptium.net":
                return httpx.Response(200, json=[record])
            return httpx.Response(200, content=ARCHIVE)

        repository = AdoptiumRepository(client=httpx.Client(transport=httpx.MockTransport(handler)))
        release = repository.fetch_release(8, "linux", "x64")
        target = temp_dir / "temp" / "8_x64_linux.tar.gz"

        assert repository.download_release(release, target) == target
        assert target.read_bytes() == ARCHIVE


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
