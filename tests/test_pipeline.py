"""End-to-end tests: Jakarta fixture sources through the whole pipeline."""

import tempfile
from pathlib import Path

import pytest
from rich.console import Console

from routemap.config import RoutemapConfig
from routemap.errors import CyclicConstantError
from routemap.models import HttpVerb
from routemap.pipeline import Pipeline

FIXTURES = Path(__file__).parent / "fixtures" / "jakarta_ee"


@pytest.fixture
def config():
    cfg = RoutemapConfig()
    cfg.source_dir = FIXTURES
    return cfg


@pytest.fixture
def result(config):
    return Pipeline(config, Console(quiet=True)).run()


def routes_of(result, simple_class):
    return [
        (e.verb, e.full_path)
        for e in result.routes.entries()
        if e.source_class.rsplit(".", 1)[-1] == simple_class
    ]


def test_pipeline_init(config):
    pipeline = Pipeline(config)
    assert pipeline.config is config
    assert pipeline.crawler is not None
    assert pipeline.parser is not None


def test_total_routes(result):
    assert len(result.routes) == 48
    assert result.errors == []
    assert result.routes.duplicates() == []


def test_constants_collected(result):
    assert len(result.constants) == 5


def test_all_verbs_resolved(result):
    assert routes_of(result, "TestResource") == [
        (HttpVerb.GET, "/test"),
        (HttpVerb.GET, "/test/users"),
        (HttpVerb.POST, "/test"),
        (HttpVerb.PUT, "/test"),
        (HttpVerb.DELETE, "/test"),
        (HttpVerb.PATCH, "/test"),
        (HttpVerb.HEAD, "/test"),
        (HttpVerb.OPTIONS, "/test"),
        (HttpVerb.GET, "/testnoleadingslash"),
        (HttpVerb.GET, "/test/withslash"),
    ]


def test_same_class_constant_and_value_argument(result):
    assert routes_of(result, "ApiResource") == [
        (HttpVerb.GET, "/api/v1/items"),
        (HttpVerb.GET, "/api/v1/api/v1/orders"),
        (HttpVerb.POST, "/api/v1/items/{id}"),
        (HttpVerb.PUT, "/api/v1/api/v1/products"),
        (HttpVerb.DELETE, "/api/v1/categories/all"),
    ]


def test_cross_class_constants(result):
    assert routes_of(result, "AdminResource") == [
        (HttpVerb.GET, "/admin/api/v2/users"),
        (HttpVerb.POST, "/admin/api/v2/users/create"),
        (HttpVerb.DELETE, "/admin/users/all"),
    ]


def test_imported_constants(result):
    assert routes_of(result, "ReportResource") == [
        (HttpVerb.GET, "/reporting/api/v3/summary"),
        (HttpVerb.GET, "/reporting/api/v3/details/full"),
        (HttpVerb.POST, "/reporting/generate/reporting"),
    ]


def test_multiline_declarations(result):
    assert routes_of(result, "MultilineResource") == [
        (HttpVerb.GET, "/multiline/items/{id}"),
        (HttpVerb.POST, "/multiline/items"),
        (HttpVerb.PUT, "/multiline/items/{id}"),
    ]


def test_media_types_inherited(result):
    orders = [e for e in result.routes.entries() if e.source_method == "listOrders"]
    assert {e.source_class for e in orders} == {
        "com.example.OrderResource",
        "com.example.ApiResource",
    }
    for entry in orders:
        assert entry.produces == frozenset({"application/json"})

    test_routes = [e for e in result.routes.entries() if e.source_class.endswith("TestResource")]
    assert all(e.produces == frozenset() for e in test_routes)


def test_pipeline_no_files():
    with tempfile.TemporaryDirectory() as tmpdir:
        cfg = RoutemapConfig()
        cfg.source_dir = Path(tmpdir)
        result = Pipeline(cfg, Console(quiet=True)).run()
        assert len(result.routes) == 0


def test_pipeline_cyclic_constants_raise():
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        (root / "Loop.java").write_text("""package com.example;

public final class Loop {
    public static final String A = B + "/a";
    public static final String B = A + "/b";
}
""")
        cfg = RoutemapConfig()
        cfg.source_dir = root
        with pytest.raises(CyclicConstantError):
            Pipeline(cfg, Console(quiet=True)).run()


def run_sources(root, sources):
    for name, text in sources.items():
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text)
    cfg = RoutemapConfig()
    cfg.source_dir = root
    return Pipeline(cfg, Console(quiet=True)).run()


def test_pipeline_wildcard_import(tmp_path):
    result = run_sources(
        tmp_path,
        {
            "config/ApiConfig.java": """package com.example.config;

public final class ApiConfig {
    public static final String BASE = "/v3";
}
""",
            "R.java": """package com.example;

import jakarta.ws.rs.*;
import com.example.config.*;

@Path(ApiConfig.BASE)
public class R {
    @GET
    public void get() {}
}
""",
        },
    )
    assert result.errors == []
    assert [e.full_path for e in result.routes.entries()] == ["/v3"]


def test_pipeline_enclosing_and_interface_constants(tmp_path):
    result = run_sources(
        tmp_path,
        {
            "Paths.java": """package com.example;

public interface Paths {
    String BASE = "/p";
}
""",
            "Outer.java": """package com.example;

public class Outer {
    public static final String BASE = "/o";

    @Path(BASE)
    public static class Inner {
        @GET
        public void get() {}
    }
}
""",
            "R.java": """package com.example;

@Path(BASE)
public class R implements Paths {
    @GET
    public void get() {}
}
""",
        },
    )
    assert result.errors == []
    paths = {e.source_class: e.full_path for e in result.routes.entries()}
    assert paths == {"com.example.Outer.Inner": "/o", "com.example.R": "/p"}
