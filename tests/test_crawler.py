"""Tests for the file crawler."""

import tempfile
from pathlib import Path

import pytest

from routemap.config import RoutemapConfig
from routemap.crawler import FileCrawler
from routemap.models import Language


@pytest.fixture
def temp_repo():
    """Create a temporary repository structure for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)

        main = root / "src" / "main" / "java" / "com" / "example"
        tests = root / "src" / "test" / "java" / "com" / "example"
        main.mkdir(parents=True)
        tests.mkdir(parents=True)
        (root / "target" / "classes").mkdir(parents=True)
        (root / "generated").mkdir()

        (main / "UserResource.java").write_text('@Path("/users")\npublic class UserResource {}\n')
        (main / "Constants.java").write_text("public final class Constants {}\n")
        (main / "notes.txt").write_text("not java")
        (tests / "UserResourceTest.java").write_text("public class UserResourceTest {}\n")
        (root / "target" / "classes" / "Copied.java").write_text("public class Copied {}\n")
        (root / "generated" / "Gen.java").write_text("public class Gen {}\n")
        (root / ".gitignore").write_text("# build output\ngenerated/\n")

        yield root


def names(files):
    return [f.relative_path.name for f in files]


def test_crawler_finds_java_sources(temp_repo):
    config = RoutemapConfig()
    config.source_dir = temp_repo
    files = FileCrawler(config).crawl()

    assert names(files) == ["Constants.java", "UserResource.java"]
    assert all(f.language == Language.JAVA for f in files)
    assert all(f.size_bytes > 0 for f in files)


def test_crawler_include_tests(temp_repo):
    config = RoutemapConfig()
    config.source_dir = temp_repo
    config.crawler.include_tests = True
    files = FileCrawler(config).crawl()

    assert "UserResourceTest.java" in names(files)


def test_crawler_without_gitignore(temp_repo):
    config = RoutemapConfig()
    config.source_dir = temp_repo
    config.crawler.respect_gitignore = False
    files = FileCrawler(config).crawl()

    assert "Gen.java" in names(files)
    assert "Copied.java" not in names(files)


def test_crawler_custom_ignore(temp_repo):
    config = RoutemapConfig()
    config.source_dir = temp_repo
    config.crawler.custom_ignore_patterns = ["Constants.java"]
    files = FileCrawler(config).crawl()

    assert names(files) == ["UserResource.java"]


def test_crawler_max_file_size(temp_repo):
    config = RoutemapConfig()
    config.source_dir = temp_repo
    config.crawler.max_file_size_kb = 0
    assert FileCrawler(config).crawl() == []
