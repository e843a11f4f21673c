"""
Base credential class that all credential types should inherit from.

A credential type owns two things the nodes never touch directly: how the
stored secret is turned into request headers (authenticate) and how a key
is checked against the upstream service (test).
"""
from typing import Any, ClassVar, Dict, List


class BaseCredential:
    """Base class for all credential types"""

    # Class variables to be overridden by subclasses
    name: ClassVar[str] = ""
    display_name: ClassVar[str] = ""
    documentation_url: ClassVar[str] = ""
    properties: ClassVar[List[Dict[str, Any]]] = []

    def __init__(self, data: Dict[str, Any]):
        """
        Initialize with credential data

        Args:
            data: Dictionary containing credential values
        """
        self.data = data

    @classmethod
    def get_definition(cls) -> Dict[str, Any]:
        """Get the credential type definition for storage and UI"""
        return {
            "name": cls.name,
            "display_name": cls.display_name,
            "documentation_url": cls.documentation_url,
            "properties": cls.properties,
        }

    def get(self, name: str) -> Any:
        """Stored value, falling back to the property's declared default"""
        value = self.data.get(name)
        if value in (None, ""):
            for prop in self.properties:
                if prop["name"] == name:
                    return prop.get("default")
        return value

    def authenticate(self) -> Dict[str, str]:
        """
        Headers to add to an outgoing request

        Returns:
            Mapping of header name to value
        """
        raise NotImplementedError("Authenticate method not implemented")

    def test(self) -> Dict[str, Any]:
        """
        Test if the credential is valid

        Returns:
            Dictionary with test results (success, message)
        """
        raise NotImplementedError("Test method not implemented")

    def validate(self) -> Dict[str, Any]:
        """
        Validate that all required properties are provided

        Returns:
            Dictionary with validation results
        """
        missing_fields = []

        for prop in self.properties:
            if prop.get("required", False) and not self.data.get(prop["name"]):
                missing_fields.append(prop["name"])

        if missing_fields:
            return {
                "valid": False,
                "message": f"Missing required fields: {', '.join(missing_fields)}"
            }

        return {"valid": True}
