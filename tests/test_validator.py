"""Tests for resource validation and per-file aggregation."""

import asyncio

import pytest

from kubeschema.config import Settings
from kubeschema.constants import ENV_KUBERNETES_VERSION, ENV_SCHEMA_LOCATION
from kubeschema.exceptions import (
    DecodeError,
    MissingFieldError,
    SchemaError,
)
from kubeschema.types import Document
from kubeschema.validator import (
    ResourceValidator,
    check_resource,
    get_string_field,
    validate,
)

VALID_SERVICE = b"""apiVersion: v1
kind: Service
metadata:
  name: web
spec:
  type: ClusterIP
  ports:
    - port: 80
      targetPort: http
"""

SERVICE_WITHOUT_SPEC = b"""apiVersion: v1
kind: Service
metadata:
  name: web
"""


class TestGetStringField:
    """Test kind/apiVersion extraction."""

    def test_present(self):
        assert get_string_field({"kind": "Pod"}, "kind", "a.yaml") == "Pod"

    def test_absent(self):
        with pytest.raises(MissingFieldError) as exc_info:
            get_string_field({"apiVersion": "v1"}, "kind", "a.yaml")
        assert exc_info.value.field == "kind"
        assert exc_info.value.message == "Missing kind key"
        assert exc_info.value.target == "a.yaml"

    def test_null(self):
        with pytest.raises(MissingFieldError) as exc_info:
            get_string_field({"kind": None}, "kind", "a.yaml")
        assert exc_info.value.message == "Missing kind value"

    def test_wrong_type_is_not_coerced(self):
        with pytest.raises(MissingFieldError) as exc_info:
            get_string_field({"apiVersion": 1}, "apiVersion", "a.yaml")
        assert exc_info.value.field == "apiVersion"
        assert "got int" in exc_info.value.message


class TestCheckResource:
    """Test schema engine invocation and violation formatting."""

    def test_conforming_resource(self, service_schema):
        resource = {"apiVersion": "v1", "kind": "Service", "metadata": {}, "spec": {}}
        assert check_resource(resource, service_schema, "u") == ()

    def test_violations_are_ordered_by_path(self, service_schema):
        resource = {
            "kind": "Service",
            "metadata": {"name": 5},
        }
        violations = check_resource(resource, service_schema, "u")

        assert [str(v) for v in violations] == [
            "Missing required field: 'spec' (at 'root')",
            "Expected type 'string', got 'int' (at 'metadata.name')",
        ]
        assert violations[0].validator == "required"

    def test_unknown_field(self, service_schema):
        resource = {"kind": "Service", "metadata": {}, "spec": {}, "extra": 1}
        (violation,) = check_resource(resource, service_schema, "u")
        assert violation.path == "root"
        assert violation.message.startswith("Unknown field.")
        assert "'extra'" in violation.message

    def test_enum_violation(self, service_schema):
        resource = {"metadata": {}, "spec": {"type": "Magic"}}
        (violation,) = check_resource(resource, service_schema, "u")
        assert violation.path == "spec.type"
        assert violation.message.startswith("Invalid value.")

    def test_sequence_index_in_path(self, service_schema):
        resource = {"metadata": {}, "spec": {"ports": [{"port": 80}, {}]}}
        (violation,) = check_resource(resource, service_schema, "u")
        assert violation.path == "spec.ports.1"

    def test_kubernetes_formats_accepted(self):
        schema = {
            "type": "object",
            "properties": {
                "a": {"type": "integer", "format": "int64"},
                "b": {"type": "string", "format": "byte"},
                "c": {"format": "int-or-string"},
            },
        }
        assert check_resource({"a": 1, "b": "@@", "c": "x"}, schema, "u") == ()

    def test_malformed_schema(self):
        with pytest.raises(SchemaError) as exc_info:
            check_resource({"kind": "Pod"}, {"type": 5}, "https://x/pod.json")
        assert exc_info.value.url == "https://x/pod.json"
        assert "Malformed schema" in exc_info.value.message

    def test_draft4_schema_selected_from_dollar_schema(self):
        schema = {
            "$schema": "http://json-schema.org/draft-04/schema#",
            "type": "object",
            "properties": {"replicas": {"type": "integer", "minimum": 0}},
        }
        (violation,) = check_resource({"replicas": -1}, schema, "u")
        assert violation.path == "replicas"


class TestValidateResource:
    """Test single document validation."""

    @pytest.mark.asyncio
    async def test_valid_resource(self, settings, fetcher, service_url):
        validator = ResourceValidator(settings, fetcher)
        result = await validator.validate_resource(
            Document(VALID_SERVICE, "svc.yaml")
        )

        assert result.file_name == "svc.yaml"
        assert result.kind == "Service"
        assert result.api_version == "v1"
        assert result.errors == ()
        assert result.is_valid
        assert fetcher.requested == [service_url]

    @pytest.mark.asyncio
    async def test_invalid_resource_is_a_result_not_an_error(
        self, settings, fetcher
    ):
        validator = ResourceValidator(settings, fetcher)
        result = await validator.validate_resource(
            Document(SERVICE_WITHOUT_SPEC, "svc.yaml")
        )

        assert result.kind == "Service"
        assert [str(v) for v in result.errors] == [
            "Missing required field: 'spec' (at 'root')"
        ]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "content", [b"{}", b"# comment only\n", b"---\n", b"\n", b"- a\n- b\n"]
    )
    async def test_empty_resources(self, settings, fetcher, content):
        validator = ResourceValidator(settings, fetcher)
        result = await validator.validate_resource(Document(content, "e.yaml"))

        assert result.kind == ""
        assert result.errors == ()
        assert result.is_empty
        assert result.complete
        assert fetcher.requested == []

    @pytest.mark.asyncio
    async def test_missing_kind_raises(self, settings, fetcher):
        validator = ResourceValidator(settings, fetcher)
        with pytest.raises(MissingFieldError) as exc_info:
            await validator.validate_resource(
                Document(b"apiVersion: v1\nmetadata: {}\n", "a.yaml")
            )
        assert exc_info.value.field == "kind"

    @pytest.mark.asyncio
    async def test_decode_error_names_file(self, settings, fetcher):
        validator = ResourceValidator(settings, fetcher)
        with pytest.raises(DecodeError) as exc_info:
            await validator.validate_resource(Document(b"kind: [x\n", "bad.yaml"))
        assert exc_info.value.target == "bad.yaml"

    @pytest.mark.asyncio
    async def test_schema_fetch_failure(self, settings, make_fetcher):
        validator = ResourceValidator(settings, make_fetcher())
        with pytest.raises(SchemaError) as exc_info:
            await validator.validate_resource(Document(VALID_SERVICE, "s.yaml"))
        assert exc_info.value.target == "s.yaml"
        assert exc_info.value.url.endswith("/service-v1.json")

    @pytest.mark.asyncio
    async def test_partial_result_keeps_extracted_fields(self, settings, fetcher):
        validator = ResourceValidator(settings, fetcher)
        result, error = await validator.check_document(
            Document(b"kind: Service\nmetadata: {}\n", "a.yaml")
        )
        assert result.kind == "Service"
        assert result.api_version == ""
        assert result.errors == ()
        assert not result.complete
        assert isinstance(error, MissingFieldError)
        assert error.field == "apiVersion"


class TestValidate:
    """Test multi-document aggregation."""

    @pytest.mark.asyncio
    async def test_empty_buffer(self, settings, fetcher):
        report = await ResourceValidator(settings, fetcher).validate(b"", "e.yaml")

        assert len(report.results) == 1
        assert report.results[0].kind == ""
        assert report.results[0].errors == ()
        assert report.error is None
        assert not report.failed

    @pytest.mark.asyncio
    async def test_missing_kind_does_not_abort_siblings(self, settings, fetcher):
        data = VALID_SERVICE + b"---\napiVersion: v1\nmetadata: {}\n---\n" + (
            SERVICE_WITHOUT_SPEC
        )
        report = await ResourceValidator(settings, fetcher).validate(data, "m.yaml")

        assert [r.kind for r in report.results] == ["Service", "", "Service"]
        assert report.results[0].is_valid
        assert not report.results[2].is_valid
        assert report.error is not None
        (error,) = list(report.error)
        assert isinstance(error, MissingFieldError)
        assert error.field == "kind"
        assert report.failed

    @pytest.mark.asyncio
    async def test_every_failure_is_collected(self, settings, fetcher):
        data = b"kind: [x\n---\napiVersion: v1\n---\nkind: Pod\napiVersion: v1\n"
        report = await ResourceValidator(settings, fetcher).validate(data, "m.yaml")

        assert len(report.results) == 3
        errors = list(report.error)
        assert [type(e) for e in errors] == [
            DecodeError,
            MissingFieldError,
            SchemaError,
        ]
        assert all(r.errors == () for r in report.results)
        assert not any(r.complete for r in report.results)
        assert report.results[2].kind == "Pod"
        assert report.results[2].api_version == "v1"

    @pytest.mark.asyncio
    async def test_unusable_schema_uri_does_not_abort_siblings(
        self, settings, service_url, service_schema, make_fetcher
    ):
        pod_url = service_url.replace("service-v1.json", "pod-v1.json")
        fetcher = make_fetcher(
            {
                pod_url: {"$schema": ["not", "a", "uri"], "type": "object"},
                service_url: service_schema,
            }
        )
        data = b"kind: Pod\napiVersion: v1\n---\n" + VALID_SERVICE
        report = await ResourceValidator(settings, fetcher).validate(data, "s.yaml")

        assert [r.kind for r in report.results] == ["Pod", "Service"]
        assert not report.results[0].complete
        assert report.results[1].complete
        assert report.results[1].is_valid
        (error,) = list(report.error)
        assert isinstance(error, SchemaError)
        assert error.url == pod_url
        assert error.target == "s.yaml"

    @pytest.mark.asyncio
    async def test_trailing_separator_reports_empty_slot(self, settings, fetcher):
        report = await ResourceValidator(settings, fetcher).validate(
            VALID_SERVICE + b"---\n", "t.yaml"
        )
        assert [r.kind for r in report.results] == ["Service", ""]
        assert report.error is None

    @pytest.mark.asyncio
    async def test_windows_line_endings(self, settings, fetcher):
        data = VALID_SERVICE.replace(b"\n", b"\r\n")
        report = await ResourceValidator(settings, fetcher).validate(
            data + b"---\r\n" + data, "w.yaml"
        )
        assert [r.kind for r in report.results] == ["Service", "Service"]
        assert all(r.is_valid for r in report.results)

    @pytest.mark.asyncio
    async def test_results_keep_input_order(self, settings):
        delays = {"pod-v1.json": 0.05, "service-v1.json": 0.0}

        class SlowFetcher:
            async def fetch(self, url):
                await asyncio.sleep(delays[url.rsplit("/", 1)[1]])
                return {"type": "object"}

        data = b"kind: Pod\napiVersion: v1\n---\nkind: Service\napiVersion: v1\n"
        report = await ResourceValidator(settings, SlowFetcher()).validate(
            data, "o.yaml"
        )
        assert [r.kind for r in report.results] == ["Pod", "Service"]

    @pytest.mark.asyncio
    async def test_concurrency_is_bounded(self):
        active = 0
        peak = 0

        class CountingFetcher:
            async def fetch(self, url):
                nonlocal active, peak
                active += 1
                peak = max(peak, active)
                await asyncio.sleep(0.01)
                active -= 1
                return {"type": "object"}

        settings = Settings(schema_location="https://schemas.test", max_concurrency=2)
        data = b"\n---\n".join(
            f"kind: K{i}\napiVersion: v1".encode() for i in range(6)
        )
        report = await ResourceValidator(settings, CountingFetcher()).validate(
            data, "c.yaml"
        )
        assert len(report.results) == 6
        assert peak <= 2


class TestSchemaLocation:
    """Test the environment > configured > default precedence."""

    def test_three_tier_precedence(self, monkeypatch, fetcher):
        default = ResourceValidator(Settings(), fetcher)
        configured = ResourceValidator(
            Settings(schema_location="https://mirror.example"), fetcher
        )
        monkeypatch.setenv(ENV_SCHEMA_LOCATION, "https://env.example")
        from_env = ResourceValidator(
            Settings(schema_location="https://mirror.example"), fetcher
        )

        urls = [
            v.schema_url("Service", "v1") for v in (default, configured, from_env)
        ]
        assert urls == [
            "https://kubernetesjsonschema.dev/master-standalone-strict/service-v1.json",
            "https://mirror.example/master-standalone-strict/service-v1.json",
            "https://env.example/master-standalone-strict/service-v1.json",
        ]

    def test_kubernetes_version(self, monkeypatch, fetcher):
        validator = ResourceValidator(
            Settings(kubernetes_version="1.18.0"), fetcher
        )
        assert "/v1.18.0-standalone-strict/" in validator.schema_url(
            "Pod", "v1"
        )

        monkeypatch.setenv(ENV_KUBERNETES_VERSION, "1.19.0")
        validator = ResourceValidator(
            Settings(kubernetes_version="1.18.0"), fetcher
        )
        assert "/v1.19.0-standalone-strict/" in validator.schema_url(
            "Pod", "v1"
        )


def test_sync_validate(settings, fetcher):
    report = validate(VALID_SERVICE, "svc.yaml", settings=settings, fetcher=fetcher)
    assert [r.kind for r in report.results] == ["Service"]
    assert report.results[0].is_valid
