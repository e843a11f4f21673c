"""Tests for the FindyMail operation table and request builder."""
import pytest

from findymail.operations import (
    OPERATIONS,
    build_request,
    clean_list,
    get_operation,
    is_empty,
)
from node_sdk import NodeValidationError, UnknownOperationError


def params(values):
    """Parameter getter backed by a dict, like the node's per-item lookup."""
    return lambda name: values.get(name, {} if name == "additionalOptions" else "")


class TestDispatch:
    """Test operation lookup."""

    def test_known_operations(self):
        assert set(OPERATIONS) == {
            "findFromName",
            "findFromLinkedin",
            "verifyEmail",
            "findPhone",
            "findEmployees",
            "reverseEmail",
            "enrichCompany",
        }

    def test_get_operation(self):
        spec = get_operation("verifyEmail")
        assert spec.url == "https://app.findymail.com/api/verify"
        assert spec.method == "POST"

    @pytest.mark.parametrize("name", ["deleteEverything", "", None, ["findFromName"]])
    def test_unknown_operation(self, name):
        with pytest.raises(UnknownOperationError) as exc_info:
            get_operation(name)
        assert exc_info.value.operation == name


class TestBuildRequest:
    """Test request construction per operation."""

    def test_find_from_name_exact_body(self):
        request = build_request(
            get_operation("findFromName"),
            params({"name": "John Doe", "domain": "example.com"}),
        )

        assert request.body == {"name": "John Doe", "domain": "example.com"}
        assert request.url == "https://app.findymail.com/api/search/name"
        assert request.method == "POST"
        assert request.authenticate is True

    def test_find_from_name_missing_both(self):
        with pytest.raises(NodeValidationError) as exc_info:
            build_request(get_operation("findFromName"), params({"name": ""}))

        assert exc_info.value.missing == ["Name", "Domain"]
        assert "Name" in str(exc_info.value)

    def test_whitespace_string_is_not_missing(self):
        request = build_request(
            get_operation("verifyEmail"),
            params({"email": " "}),
        )
        assert request.body == {"email": " "}

    def test_webhook_url_included_when_set(self):
        request = build_request(
            get_operation("findFromLinkedin"),
            params({
                "linkedinUrl": "https://www.linkedin.com/in/johndoe",
                "additionalOptions": {"webhook_url": "https://hooks.example.com/a"},
            }),
        )
        assert request.body == {
            "linkedin_url": "https://www.linkedin.com/in/johndoe",
            "webhook_url": "https://hooks.example.com/a",
        }

    def test_empty_webhook_url_omitted(self):
        request = build_request(
            get_operation("verifyEmail"),
            params({"email": "a@example.com", "additionalOptions": {"webhook_url": ""}}),
        )
        assert request.body == {"email": "a@example.com"}

    def test_none_additional_options(self):
        request = build_request(
            get_operation("verifyEmail"),
            lambda name: None if name == "additionalOptions" else "a@example.com",
        )
        assert request.body == {"email": "a@example.com"}

    def test_find_phone_maps_to_linkedin_url(self):
        request = build_request(
            get_operation("findPhone"),
            params({"phoneLinkedinUrl": "https://www.linkedin.com/in/jane"}),
        )
        assert request.body == {"linkedin_url": "https://www.linkedin.com/in/jane"}
        assert request.url.endswith("/api/search/phone")

    def test_find_employees_filters_blank_titles(self):
        request = build_request(
            get_operation("findEmployees"),
            params({"companyDomain": "example.com", "jobTitles": ["", "  ", "Engineer"]}),
        )
        assert request.body == {"website": "example.com", "job_titles": ["Engineer"]}

    def test_find_employees_all_blank_titles(self):
        with pytest.raises(NodeValidationError) as exc_info:
            build_request(
                get_operation("findEmployees"),
                params({"companyDomain": "example.com", "jobTitles": ["", "  "]}),
            )
        assert exc_info.value.missing == ["Job Titles"]

    def test_find_employees_single_title_string(self):
        request = build_request(
            get_operation("findEmployees"),
            params({"companyDomain": "example.com", "jobTitles": "CTO"}),
        )
        assert request.body["job_titles"] == ["CTO"]

    def test_enrich_company_domain_only(self):
        request = build_request(
            get_operation("enrichCompany"),
            params({"companyName": "", "companyDomain": "stripe.com", "linkedinCompanyUrl": ""}),
        )
        assert request.body == {"domain": "stripe.com"}

    def test_enrich_company_all_empty(self):
        with pytest.raises(NodeValidationError) as exc_info:
            build_request(
                get_operation("enrichCompany"),
                params({"companyName": "", "companyDomain": "", "linkedinCompanyUrl": ""}),
            )
        assert exc_info.value.missing == ["Company Name", "Company Domain", "Company LinkedIn URL"]

    def test_enrich_company_several_alternatives(self):
        request = build_request(
            get_operation("enrichCompany"),
            params({"companyName": "Stripe", "linkedinCompanyUrl": "https://www.linkedin.com/company/stripe"}),
        )
        assert request.body == {
            "name": "Stripe",
            "linkedin_url": "https://www.linkedin.com/company/stripe",
        }

    def test_reverse_email_with_profile(self):
        request = build_request(
            get_operation("reverseEmail"),
            params({"reverseEmailAddress": "john@example.com", "additionalOptions": {"with_profile": True}}),
        )
        assert request.body == {"email": "john@example.com", "with_profile": True}

    def test_options_not_declared_for_operation_are_ignored(self):
        request = build_request(
            get_operation("enrichCompany"),
            params({"companyDomain": "stripe.com", "additionalOptions": {"webhook_url": "https://x"}}),
        )
        assert request.body == {"domain": "stripe.com"}

    @pytest.mark.parametrize("name", sorted(OPERATIONS))
    def test_required_only_body_has_exactly_required_keys(self, name):
        spec = OPERATIONS[name]
        values = {}
        for field_spec in spec.required + spec.required_any:
            values[field_spec.param] = ["x"] if field_spec.kind == "list" else "x"

        request = build_request(spec, params(values))

        expected = {f.body_key for f in spec.required + spec.required_any}
        assert set(request.body) == expected

    def test_descriptor_is_fresh_per_call(self):
        spec = get_operation("verifyEmail")
        first = build_request(spec, params({"email": "a@example.com"}))
        second = build_request(spec, params({"email": "b@example.com"}))
        assert first is not second
        assert first.body == {"email": "a@example.com"}


class TestHelpers:
    """Test emptiness and list cleaning helpers."""

    @pytest.mark.parametrize("value", [None, "", [], (), {}])
    def test_is_empty(self, value):
        assert is_empty(value)

    @pytest.mark.parametrize("value", [" ", "x", ["x"], False, 0])
    def test_is_not_empty(self, value):
        assert not is_empty(value)

    def test_clean_list(self):
        assert clean_list(["a", None, "", "\t", "b"]) == ["a", "b"]
        assert clean_list(None) == []
        assert clean_list("  ") == []
