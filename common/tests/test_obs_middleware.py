"""Tests for mux_common.observability.middleware."""

import unittest

from fastapi import FastAPI
from fastapi.testclient import TestClient

from mux_common.observability.metrics import create_counter
from mux_common.observability.middleware import MetricsMiddleware
from mux_common.observability.testing import reset_metrics


class TestMetricsMiddleware(unittest.TestCase):
    def setUp(self):
        reset_metrics()
        self.counter = create_counter(
            "mux_test_http_total", "requests", ["method", "path", "status"]
        )
        app = FastAPI()
        app.add_middleware(MetricsMiddleware, counter=self.counter, ignored_paths={"/metrics"})

        @app.post("/tools/{tool_id}")
        def run(tool_id: str):
            return {"tool": tool_id}

        @app.get("/metrics")
        def metrics():
            return "ok"

        self.client = TestClient(app)

    def tearDown(self):
        reset_metrics()

    def _count(self, method, path, status):
        return self.counter.labels(method=method, path=path, status=status)._value.get()

    def test_path_parameters_collapse_to_template(self):
        self.client.post("/tools/mux-analytics")
        self.client.post("/tools/mux-errors")
        self.assertEqual(self._count("POST", "/tools/{tool_id}", 200), 2.0)
        self.assertEqual(self._count("POST", "/tools/mux-errors", 200), 0.0)

    def test_unmatched_path_uses_raw_url(self):
        self.client.get("/nope")
        self.assertEqual(self._count("GET", "/nope", 404), 1.0)

    def test_ignored_path(self):
        self.client.get("/metrics")
        self.assertEqual(self._count("GET", "/metrics", 200), 0.0)
