from .code_generator import (
    CodeGenerationExhaustedError,
    generate_discount_code,
    generate_unique_discount_code,
)
from .discount import (
    AlreadyRedeemedError,
    BusinessNotFoundError,
    CodeAlreadyIssuedError,
    CodeExpiredError,
    CodeNotFoundError,
    CodeUnavailableError,
    DiscountAccessDeniedError,
    DiscountCodePage,
    DiscountServiceError,
    DiscountValidationError,
    RedemptionResult,
    ResponseNotReadyError,
    issue_discount_code,
    issue_discount_code_for_owner,
    list_discount_codes,
    redeem_discount_code,
)
