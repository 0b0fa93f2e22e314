class SchemeEngineError(Exception):
    """Base exception for Scheme Engine errors."""
    
    def __init__(self, message=None, code=None, details=None):
        """Initialize the exception.
        
        Args:
            message: Error message
            code: Error code
            details: Additional error details
        """
        self.message = message or "An error occurred in the Scheme Engine"
        self.code = code
        self.details = details
        super().__init__(self.message)
    
    def __str__(self):
        """String representation of the error."""
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message
    
    def to_dict(self):
        """Convert the exception to a dictionary."""
        error_dict = {
            'error': self.__class__.__name__,
            'message': self.message,
        }
        
        if self.code:
            error_dict['code'] = self.code
            
        if self.details:
            error_dict['details'] = self.details
            
        return error_dict


class ConfigError(SchemeEngineError):
    """Exception raised for configuration errors."""
    
    def __init__(self, message=None, code=None, details=None):
        message = message or "Configuration error"
        super().__init__(message, code, details)


class DatabaseError(SchemeEngineError):
    """Exception raised for database-related errors."""
    
    def __init__(self, message=None, code=None, details=None):
        message = message or "Database error"
        super().__init__(message, code, details)


class ValidationError(SchemeEngineError):
    """Exception raised for tier or order line validation errors."""
    
    def __init__(self, message=None, code=None, details=None):
        message = message or "Validation error"
        super().__init__(message, code, details)


class RepositoryError(SchemeEngineError):
    """Exception raised when scheme master data cannot be read."""
    
    def __init__(self, message=None, code=None, details=None):
        message = message or "Scheme repository error"
        super().__init__(message, code, details)


class NotFoundError(SchemeEngineError):
    """Exception raised when a requested resource is not found."""
    
    def __init__(self, message=None, code=None, details=None):
        message = message or "Resource not found"
        super().__init__(message, code, details)

