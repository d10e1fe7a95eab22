"""
Exception classes for the user administration console.

Every error carries a user-facing message plus structured context so the
UI layer can show a notification while logs keep the technical details.
"""

import logging
from typing import Optional, Dict, Any, List
from pathlib import Path

logger = logging.getLogger(__name__)


class UserAdminError(Exception):
    """
    Base exception for the console.
    
    Attributes:
        message: Error message
        context: Additional context information
        recovery_suggestions: List of suggested recovery actions
    """
    
    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None,
                 recovery_suggestions: Optional[List[str]] = None):
        self.message = message
        self.context = context or {}
        self.recovery_suggestions = recovery_suggestions or []
        super().__init__(self.message)
    
    def __str__(self) -> str:
        return self.message
    
    def get_full_details(self) -> Dict[str, Any]:
        """Get complete error details including context and suggestions."""
        return {
            'error_type': self.__class__.__name__,
            'message': self.message,
            'context': self.context,
            'recovery_suggestions': self.recovery_suggestions
        }


class TransportError(UserAdminError):
    """
    Raised when the REST backend answers with a non-2xx status or the
    request never completes (connection refused, timeout, ...).
    """
    
    def __init__(self, message: str, operation: str, status_code: Optional[int] = None,
                 detail: Optional[str] = None):
        self.operation = operation
        self.status_code = status_code
        self.detail = detail
        
        context = {
            'operation': operation,
            'status_code': status_code,
            'detail': detail
        }
        
        recovery_suggestions = [
            "Check that the API server is running",
            "Verify api.base_url in config.yaml or USER_ADMIN_API_URL",
            "Try the action again"
        ]
        
        super().__init__(message, context, recovery_suggestions)


class DuplicateRecordError(UserAdminError):
    """
    Raised before any network call when a create/update would give two
    records the same uniqueness key.
    """
    
    def __init__(self, field_name: str, value: str, message: Optional[str] = None,
                 conflicting_id: Optional[str] = None):
        self.field_name = field_name
        self.value = value
        self.conflicting_id = conflicting_id
        
        if message is None:
            message = f"A record with this {field_name} already exists"
        
        context = {
            'field_name': field_name,
            'value': value,
            'conflicting_id': conflicting_id
        }
        
        super().__init__(message, context, [f"Enter a different value for {field_name}"])


class SchemaLoadError(UserAdminError):
    """Raised when a schema file cannot be parsed into a form schema."""
    
    def __init__(self, schema_path: Path, original_error: Exception,
                 message: Optional[str] = None):
        self.schema_path = schema_path
        self.original_error = original_error
        
        if message is None:
            message = f"Failed to load schema from {schema_path}: {str(original_error)}"
        
        context = {
            'schema_path': str(schema_path),
            'original_error_type': type(original_error).__name__,
            'original_error_message': str(original_error)
        }
        
        recovery_suggestions = [
            "Check the schema file syntax (YAML or JSON)",
            "Ensure every field has a 'type' and select fields have 'choices'",
            "The built-in user schema is used as a fallback"
        ]
        
        super().__init__(message, context, recovery_suggestions)
