# partnerhub/modules/orders/exceptions.py
# Domain-specific exceptions for the Orders module (enquiry intake and settlement)

class OrdersError(Exception):
    """Base exception for orders module errors."""
    pass

class InvalidEnquiryIdError(OrdersError):
    def __init__(self):
        super().__init__("Invalid Enquiry ID provided.")

class EnquiryNotFoundError(OrdersError):
    def __init__(self, enquiry_id: str):
        super().__init__("Enquiry not found.")
        self.enquiry_id = enquiry_id

class CatalogNotFoundError(OrdersError):
    def __init__(self, catalog_id: str, message: str = "Catalog not found."):
        super().__init__(message)
        self.catalog_id = catalog_id

class PartnerUserNotFoundError(OrdersError):
    def __init__(self, user_id: str):
        super().__init__("Partner user not found.")
        self.user_id = user_id

class MissingPartnerProfileIdError(OrdersError):
    """The submitting user has no linked partner profile."""
    def __init__(self, user_id: str):
        super().__init__("Partner profile ID not found.")
        self.user_id = user_id

class PartnerProfileNotFoundError(OrdersError):
    def __init__(self, profile_id: str):
        super().__init__("Partner profile not found.")
        self.profile_id = profile_id

class EnquiryStateConflictError(OrdersError):
    """The enquiry left `New` between the read and the status write."""
    def __init__(self, enquiry_id: str):
        super().__init__("Enquiry status changed during settlement.")
        self.enquiry_id = enquiry_id
