"""
FindyMail API credential.

The key is sent either as an ``X-API-Key`` header or as an
``Authorization: Bearer`` token depending on the ``headerScheme`` stored with
the credential; both schemes are in use across FindyMail deployments.

SYNC-CELERY SAFE: All methods are synchronous with timeouts.
"""
import logging
from typing import Any, Dict

from node_sdk import BaseCredential, HttpApiError, HttpClient, NodeOperationError, NodeTimeoutError

from .operations import CREDITS_URL


logger = logging.getLogger(__name__)

HEADER_SCHEMES = {
    "apiKey": lambda key: {"X-API-Key": key},
    "bearer": lambda key: {"Authorization": f"Bearer {key}"},
}


class FindyMailApiCredential(BaseCredential):
    """FindyMail API credential implementation"""

    name = "findyMailApi"
    display_name = "FindyMail API"
    documentation_url = "https://app.findymail.com/docs/"
    properties = [
        {
            "name": "apiKey",
            "displayName": "API Key",
            "type": "string",
            "default": "",
            "required": True,
            "typeOptions": {"password": True},
            "description": "Your FindyMail API key"
        },
        {
            "name": "headerScheme",
            "displayName": "Send Key As",
            "type": "options",
            "default": "apiKey",
            "required": False,
            "options": [
                {"name": "X-API-Key Header", "value": "apiKey"},
                {"name": "Bearer Token", "value": "bearer"},
            ],
            "description": "How the API key is attached to requests"
        },
    ]

    def authenticate(self) -> Dict[str, str]:
        validation = self.validate()
        if not validation["valid"]:
            raise NodeOperationError(validation["message"])
        scheme = self.get("headerScheme")
        if scheme not in HEADER_SCHEMES:
            raise ValueError(f"Unsupported header scheme: {scheme}")
        return HEADER_SCHEMES[scheme](self.data["apiKey"])

    def test(self) -> Dict[str, Any]:
        """
        Test the key against the credits endpoint, which costs no credits.

        Returns:
            Dictionary with test results (success, message)
        """
        validation = self.validate()
        if not validation["valid"]:
            return {
                "success": False,
                "message": validation["message"]
            }

        try:
            response = HttpClient().get(CREDITS_URL, headers=self.authenticate())
        except NodeTimeoutError:
            return {
                "success": False,
                "message": "Connection timeout. Please check your network."
            }
        except (HttpApiError, ValueError) as e:
            return {
                "success": False,
                "message": f"Error testing FindyMail API credential: {e}"
            }

        if response.status_code == 200:
            try:
                data = response.json()
            except ValueError:
                data = {}
            return {
                "success": True,
                "message": "Successfully connected to FindyMail API",
                "data": data,
            }
        if response.status_code in (401, 403):
            return {
                "success": False,
                "message": "Invalid API key. Please check your FindyMail API key."
            }

        logger.warning("FindyMail credential test failed with status %s", response.status_code)
        return {
            "success": False,
            "message": f"FindyMail API error: {response.error_message()}"
        }
