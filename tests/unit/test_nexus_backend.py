"""Tests for NexusBackend — search, pagination, asset filtering."""

from __future__ import annotations

import base64

import pytest

from nexusdl.backends import RepositoryBackend
from nexusdl.backends.nexus import NexusBackend, asset_type
from nexusdl.core.errors import DownloaderError
from nexusdl.models.results import ErrorKind

BASE = "https://nexus.test/repository/releases/com/example/app"


@pytest.fixture
def backend(fake_repo, settings) -> NexusBackend:
    return NexusBackend(
        fake_repo.nexus_url,
        "deploy",
        "secret",
        "service/rest/v1/search/assets",
        settings=settings,
        transport=fake_repo.transport,
    )


class TestAssetType:
    def test_classified_asset(self):
        parsed = asset_type("1.2.0", f"{BASE}/1.2.0/app-1.2.0-runnable.jar")
        assert parsed.classifier == "runnable"
        assert parsed.extension == "jar"

    def test_version_missing_from_url(self):
        assert not asset_type("9.9", f"{BASE}/1.2.0/app-1.2.0.jar").constrained


class TestResolveCandidates:
    def test_satisfies_protocol(self, backend):
        assert isinstance(backend, RepositoryBackend)

    def test_filters_by_type_and_skips_auxiliary(self, backend, fake_repo, make_request, make_nexus_item):
        fake_repo.add_search_page({
            "items": [
                make_nexus_item(
                    "1.2.0",
                    (f"{BASE}/1.2.0/app-1.2.0-runnable.jar", "aaa"),
                    (f"{BASE}/1.2.0/app-1.2.0-runnable.jar.sha1", "bbb"),
                    (f"{BASE}/1.2.0/app-1.2.0-sources.jar", "ccc"),
                    (f"{BASE}/1.2.0/app-1.2.0.pom", "ddd"),
                    (f"{BASE}/1.2.0/app-1.2.0.jar", "eee"),
                ),
            ],
        })
        candidates = backend.resolve_candidates(make_request(type="runnable.jar"))
        assert [c.download_url for c in candidates] == [f"{BASE}/1.2.0/app-1.2.0-runnable.jar"]
        assert candidates[0].expected_hash == "aaa"
        assert candidates[0].version == "1.2.0"

    def test_sends_query_and_credentials(self, backend, fake_repo, make_request):
        fake_repo.add_search_page({"items": []})
        backend.resolve_candidates(make_request(repository="snapshots"))

        request = fake_repo.requests[0]
        assert backend.search_url == fake_repo.search_url
        assert str(request.url).split("?")[0] == backend.search_url
        assert request.url.params["maven.groupId"] == "com.example"
        assert request.url.params["maven.artifactId"] == "app"
        assert request.url.params["repository"] == "snapshots"
        assert request.headers["accept"] == "application/json"
        expected = base64.b64encode(b"deploy:secret").decode()
        assert request.headers["authorization"] == f"Basic {expected}"

    def test_follows_continuation_tokens(self, backend, fake_repo, make_request, make_nexus_item):
        fake_repo.add_search_page({
            "items": [make_nexus_item("1.0.0", (f"{BASE}/1.0.0/app-1.0.0.jar", "a1"))],
            "continuationToken": "page2",
        })
        fake_repo.add_search_page(
            {"items": [make_nexus_item("1.1.0", (f"{BASE}/1.1.0/app-1.1.0.jar", "a2"))]},
            token="page2",
        )
        candidates = backend.resolve_candidates(make_request())
        assert [c.version for c in candidates] == ["1.0.0", "1.1.0"]
        assert len(fake_repo.requests) == 2
        assert fake_repo.requests[1].url.params["continuationToken"] == "page2"

    def test_repeated_token_is_network_error(self, backend, fake_repo, make_request):
        fake_repo.add_search_page({"items": [], "continuationToken": "loop"})
        fake_repo.add_search_page({"items": [], "continuationToken": "loop"}, token="loop")
        with pytest.raises(DownloaderError) as exc_info:
            backend.resolve_candidates(make_request())
        assert exc_info.value.kind is ErrorKind.NETWORK_ERROR

    def test_assets_without_checksum_skipped(self, backend, fake_repo, make_request, make_nexus_item):
        fake_repo.add_search_page({
            "items": [
                make_nexus_item("1.0.0", (f"{BASE}/1.0.0/app-1.0.0.jar", None)),
                {"version": "1.1.0", "assets": [{"checksum": {"sha1": "x"}}]},
            ],
        })
        assert backend.resolve_candidates(make_request()) == []

    def test_wrong_content_type(self, backend, fake_repo, make_request):
        fake_repo.add_search_page({"items": []}, content_type="text/html")
        with pytest.raises(DownloaderError) as exc_info:
            backend.resolve_candidates(make_request())
        assert exc_info.value.kind is ErrorKind.NETWORK_ERROR
        assert "text/html" in exc_info.value.message

    def test_malformed_json(self, backend, fake_repo, make_request):
        fake_repo.add(fake_repo.search_url, "{not json", content_type="application/json")
        with pytest.raises(DownloaderError) as exc_info:
            backend.resolve_candidates(make_request())
        assert exc_info.value.kind is ErrorKind.INTERNAL_ERROR

    def test_server_error(self, backend, fake_repo, make_request):
        fake_repo.add(fake_repo.search_url, "oops", status=500, content_type="text/plain")
        with pytest.raises(DownloaderError) as exc_info:
            backend.resolve_candidates(make_request())
        assert exc_info.value.kind is ErrorKind.NETWORK_ERROR


class TestFetchContent:
    def test_streams_to_file(self, backend, fake_repo, make_candidate, tmp_path):
        candidate = make_candidate(content=b"payload")
        fake_repo.add(candidate.download_url, b"payload")
        target = tmp_path / candidate.file_name

        assert backend.fetch_content(candidate, target) == len(b"payload")
        assert target.read_bytes() == b"payload"
        assert not (tmp_path / (candidate.file_name + ".part")).exists()

    def test_missing_asset_leaves_no_file(self, backend, make_candidate, tmp_path):
        candidate = make_candidate()
        target = tmp_path / candidate.file_name
        with pytest.raises(DownloaderError) as exc_info:
            backend.fetch_content(candidate, target)
        assert exc_info.value.kind is ErrorKind.NOT_FOUND
        assert list(tmp_path.iterdir()) == []
