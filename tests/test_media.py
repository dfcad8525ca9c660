import pytest
import requests

from geopost.errors import AnalysisFailed
from geopost.services import media_service
from geopost.services.media_service import ImageScorer, classify, extension, needs_score


@pytest.mark.parametrize(
	"filename,kind",
	[
		("a.jpeg", "image"),
		("a.jpg", "image"),
		("a.gif", "image"),
		("a.png", "image"),
		("clip.mov", "video"),
		("clip.mp4", "video"),
		("clip.avi", "video"),
		("clip.flv", "video"),
		("clip.wmv", "video"),
	],
)
def test_classify_known_extensions(filename, kind):
	assert classify(filename) == kind


@pytest.mark.parametrize("filename", ["a.JPEG", "a.webp", "noext", "a.", "archive.tar.gz", ""])
def test_classify_unknown(filename):
	assert classify(filename) == "unknown"


def test_extension_uses_last_dot_of_base_name():
	assert extension("dir.v2/photo.final.jpeg") == ".jpeg"
	assert extension("dir.v2/photo") == ""


def test_only_exact_jpeg_is_scored():
	assert needs_score("photo.jpeg")
	for name in ("photo.jpg", "photo.JPEG", "photo.png", "photo.gif", "clip.mp4", "photo"):
		assert not needs_score(name)


class _Reply:
	def __init__(self, status=200, payload=None, text=""):
		self.status_code = status
		self._payload = payload
		self.text = text

	def raise_for_status(self):
		if self.status_code >= 400:
			raise requests.HTTPError(f"{self.status_code}")

	def json(self):
		if self._payload is None:
			raise ValueError("no json")
		return self._payload


def test_scorer_posts_file_and_reads_score(monkeypatch):
	seen = {}

	def fake_post(url, files, timeout):
		seen.update(url=url, files=files, timeout=timeout)
		return _Reply(payload={"score": 0.75})

	monkeypatch.setattr(media_service.requests, "post", fake_post)
	scorer = ImageScorer("http://analysis/score", timeout=3.0)
	assert scorer.score(b"bytes", "p.jpeg") == 0.75
	assert seen["url"] == "http://analysis/score"
	assert seen["timeout"] == 3.0
	assert seen["files"]["file"] == ("p.jpeg", b"bytes", "image/jpeg")


def test_scorer_is_deterministic_for_same_bytes(monkeypatch):
	monkeypatch.setattr(media_service.requests, "post", lambda url, files, timeout: _Reply(payload={"score": 0.5}))
	scorer = ImageScorer("http://analysis/score")
	assert scorer.score(b"x", "p.jpeg") == scorer.score(b"x", "p.jpeg")


@pytest.mark.parametrize(
	"reply",
	[_Reply(status=503, text="down"), _Reply(payload=None, text="<html>"), _Reply(payload={"other": 1}), _Reply(payload=[1])],
)
def test_scorer_failures_raise_analysis_failed(monkeypatch, reply):
	monkeypatch.setattr(media_service.requests, "post", lambda url, files, timeout: reply)
	with pytest.raises(AnalysisFailed):
		ImageScorer("http://analysis/score").score(b"x", "p.jpeg")


def test_scorer_transport_error(monkeypatch):
	def boom(url, files, timeout):
		raise requests.ConnectionError("refused")

	monkeypatch.setattr(media_service.requests, "post", boom)
	with pytest.raises(AnalysisFailed):
		ImageScorer("http://analysis/score").score(b"x", "p.jpeg")


def test_scorer_without_url():
	with pytest.raises(AnalysisFailed):
		ImageScorer(None).score(b"x", "p.jpeg")
