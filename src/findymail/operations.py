"""
FindyMail operation table and request builder.

Each upstream capability is one OperationSpec row. The node resolves the
row for an item, then build_request() turns the item's parameter values
into a RequestDescriptor. Paths and body field names are fixed by the
FindyMail API and must not be renamed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Literal, Mapping, Tuple

from node_sdk import NodeValidationError, RequestDescriptor, UnknownOperationError


API_URL = "https://app.findymail.com/api"
CREDITS_URL = f"{API_URL}/credits"

FieldKind = Literal["string", "list", "boolean"]


@dataclass(frozen=True)
class FieldSpec:
    """One node parameter and the body field it is sent as."""
    param: str
    body_key: str
    display_name: str
    kind: FieldKind = "string"
    placeholder: str = ""
    description: str = ""


@dataclass(frozen=True)
class OperationSpec:
    """
    Static description of one FindyMail operation.

    ``required`` fields must all be non-empty. ``required_any`` is a group of
    alternatives of which at least one must be non-empty. ``optional`` fields
    live in the ``additionalOptions`` collection and are sent only when set.
    """
    name: str
    display_name: str
    description: str
    action: str
    url: str
    method: Literal["GET", "POST"] = "POST"
    required: Tuple[FieldSpec, ...] = ()
    required_any: Tuple[FieldSpec, ...] = ()
    optional: Tuple[FieldSpec, ...] = ()

    @property
    def fields(self) -> Tuple[FieldSpec, ...]:
        return self.required + self.required_any


WEBHOOK_URL = FieldSpec(
    "webhook_url", "webhook_url", "Webhook URL",
    placeholder="https://your-webhook-url.com",
    description="URL to receive the result asynchronously (optional)",
)


OPERATIONS: Dict[str, OperationSpec] = {
    spec.name: spec
    for spec in (
        OperationSpec(
            name="findFromName",
            display_name="Find Email From Name + Company",
            description="Find email address from name and company",
            action="Find email from name",
            url=f"{API_URL}/search/name",
            required=(
                FieldSpec("name", "name", "Name", placeholder="John Doe",
                          description="The full name of the person"),
                FieldSpec("domain", "domain", "Domain", placeholder="example.com",
                          description="The company domain to search for the email"),
            ),
            optional=(WEBHOOK_URL,),
        ),
        OperationSpec(
            name="findFromLinkedin",
            display_name="Find Email From Linkedin",
            description="Find email address from Linkedin profile URL",
            action="Find email from linkedin",
            url=f"{API_URL}/search/linkedin",
            required=(
                FieldSpec("linkedinUrl", "linkedin_url", "Linkedin URL",
                          placeholder="https://www.linkedin.com/in/johndoe",
                          description="The Linkedin profile URL of the person"),
            ),
            optional=(WEBHOOK_URL,),
        ),
        OperationSpec(
            name="verifyEmail",
            display_name="Verify Email",
            description="Verify if an email address is valid and deliverable",
            action="Verify email",
            url=f"{API_URL}/verify",
            required=(
                FieldSpec("email", "email", "Email", placeholder="example@example.com",
                          description="The email address to verify"),
            ),
            optional=(WEBHOOK_URL,),
        ),
        OperationSpec(
            name="findPhone",
            display_name="Find Phone Number",
            description="Find phone number from LinkedIn profile URL",
            action="Find phone",
            url=f"{API_URL}/search/phone",
            required=(
                FieldSpec("phoneLinkedinUrl", "linkedin_url", "Phone LinkedIn URL",
                          placeholder="https://www.linkedin.com/in/johndoe",
                          description="The LinkedIn profile URL to find phone number from"),
            ),
            optional=(WEBHOOK_URL,),
        ),
        OperationSpec(
            name="findEmployees",
            display_name="Find Employees",
            description="Find employees from a company domain",
            action="Find employees",
            url=f"{API_URL}/search/employees",
            required=(
                FieldSpec("companyDomain", "website", "Company Domain", placeholder="example.com",
                          description="The company domain to find employees from"),
                FieldSpec("jobTitles", "job_titles", "Job Titles", kind="list",
                          placeholder="Software Engineer",
                          description="Job titles to search for (one per line)"),
            ),
            optional=(WEBHOOK_URL,),
        ),
        OperationSpec(
            name="reverseEmail",
            display_name="Reverse Email Lookup",
            description="Find the person behind an email address",
            action="Reverse email lookup",
            url=f"{API_URL}/search/reverse-email",
            required=(
                FieldSpec("reverseEmailAddress", "email", "Email", placeholder="john@example.com",
                          description="The email address to look up"),
            ),
            optional=(
                FieldSpec("with_profile", "with_profile", "With Profile", kind="boolean",
                          description="Whether to return the full LinkedIn profile"),
            ),
        ),
        OperationSpec(
            name="enrichCompany",
            display_name="Enrich Company",
            description="Get company information from its name, domain or LinkedIn URL",
            action="Enrich company",
            url=f"{API_URL}/search/company",
            required_any=(
                FieldSpec("companyName", "name", "Company Name", placeholder="Stripe",
                          description="The name of the company"),
                FieldSpec("companyDomain", "domain", "Company Domain", placeholder="stripe.com",
                          description="The company website domain"),
                FieldSpec("linkedinCompanyUrl", "linkedin_url", "Company LinkedIn URL",
                          placeholder="https://www.linkedin.com/company/stripe",
                          description="The LinkedIn page of the company"),
            ),
        ),
    )
}


def get_operation(name: Any) -> OperationSpec:
    """Resolve an operation id, or raise UnknownOperationError."""
    try:
        return OPERATIONS[name]
    except (KeyError, TypeError):
        raise UnknownOperationError(name) from None


def is_empty(value: Any) -> bool:
    """None, "" and empty collections count as not provided."""
    if value is None or value == "":
        return True
    if isinstance(value, (list, tuple, dict, set)):
        return len(value) == 0
    return False


def clean_list(value: Any) -> List[Any]:
    """Drop None, blank and whitespace-only entries from a list parameter."""
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    return [v for v in value if v is not None and not (isinstance(v, str) and not v.strip())]


def _value(spec: FieldSpec, raw: Any) -> Any:
    if spec.kind == "list":
        return clean_list(raw)
    return raw


def build_request(
    operation: OperationSpec,
    get_param: Callable[[str], Any],
) -> RequestDescriptor:
    """
    Build the request for one item.

    Args:
        operation: Resolved operation row
        get_param: Returns the item's value for a parameter name
            (``additionalOptions`` returns the options dict)

    Raises:
        NodeValidationError: a required field, or every alternative of
            ``required_any``, is empty
    """
    body: Dict[str, Any] = {}
    missing: List[str] = []

    for spec in operation.required:
        value = _value(spec, get_param(spec.param))
        if is_empty(value):
            missing.append(spec.display_name)
        else:
            body[spec.body_key] = value

    if missing:
        raise NodeValidationError(
            f"Missing required parameter(s): {', '.join(missing)}",
            missing=missing,
        )

    if operation.required_any:
        provided = 0
        for spec in operation.required_any:
            value = _value(spec, get_param(spec.param))
            if not is_empty(value):
                body[spec.body_key] = value
                provided += 1
        if not provided:
            names = [spec.display_name for spec in operation.required_any]
            raise NodeValidationError(
                f"At least one of {', '.join(names)} is required",
                missing=names,
            )

    if operation.optional:
        options: Mapping[str, Any] = get_param("additionalOptions") or {}
        for spec in operation.optional:
            value = _value(spec, options.get(spec.param))
            if not is_empty(value):
                body[spec.body_key] = value

    return RequestDescriptor(method=operation.method, url=operation.url, body=body)
