"""
Field identifiers, message keys and limits of the Swiss QR-bill standard.

Validation messages refer to fields and messages by these stable identifiers.
Turning them into display text is the job of an external message catalog.
"""

# =============================================================================
# Field identifiers
# =============================================================================

FIELD_CURRENCY = "currency"
FIELD_AMOUNT = "amount"
FIELD_ACCOUNT = "account"
FIELD_REFERENCE = "reference"
FIELD_REFERENCE_TYPE = "referenceType"
FIELD_UNSTRUCTURED_MESSAGE = "unstructuredMessage"
FIELD_BILL_INFORMATION = "billInformation"
FIELD_ALTERNATIVE_SCHEMES = "alternativeSchemes"

FIELD_ROOT_CREDITOR = "creditor."
FIELD_ROOT_DEBTOR = "debtor."

SUBFIELD_NAME = "name"
SUBFIELD_ADDRESS_LINE_1 = "addressLine1"
SUBFIELD_ADDRESS_LINE_2 = "addressLine2"
SUBFIELD_STREET = "street"
SUBFIELD_HOUSE_NO = "houseNo"
SUBFIELD_POSTAL_CODE = "postalCode"
SUBFIELD_TOWN = "town"
SUBFIELD_COUNTRY_CODE = "countryCode"

# Convenience identifiers for the creditor, the only mandatory address
FIELD_CREDITOR_NAME = FIELD_ROOT_CREDITOR + SUBFIELD_NAME
FIELD_CREDITOR_ADDRESS_LINE_1 = FIELD_ROOT_CREDITOR + SUBFIELD_ADDRESS_LINE_1
FIELD_CREDITOR_ADDRESS_LINE_2 = FIELD_ROOT_CREDITOR + SUBFIELD_ADDRESS_LINE_2
FIELD_CREDITOR_STREET = FIELD_ROOT_CREDITOR + SUBFIELD_STREET
FIELD_CREDITOR_HOUSE_NO = FIELD_ROOT_CREDITOR + SUBFIELD_HOUSE_NO
FIELD_CREDITOR_POSTAL_CODE = FIELD_ROOT_CREDITOR + SUBFIELD_POSTAL_CODE
FIELD_CREDITOR_TOWN = FIELD_ROOT_CREDITOR + SUBFIELD_TOWN
FIELD_CREDITOR_COUNTRY_CODE = FIELD_ROOT_CREDITOR + SUBFIELD_COUNTRY_CODE

# =============================================================================
# Message keys
# =============================================================================

KEY_FIELD_VALUE_MISSING = "field_value_missing"
KEY_FIELD_VALUE_CLIPPED = "field_value_clipped"
KEY_FIELD_VALUE_TOO_LONG = "field_value_too_long"
KEY_ADDRESS_TYPE_CONFLICT = "address_type_conflict"
KEY_COUNTRY_CODE_INVALID = "country_code_invalid"
KEY_REPLACED_UNSUPPORTED_CHARACTERS = "replaced_unsupported_characters"
KEY_UNSUPPORTED_CHARACTERS = "unsupported_characters"

KEY_CURRENCY_NOT_CHF_OR_EUR = "currency_not_chf_or_eur"
KEY_AMOUNT_OUTSIDE_VALID_RANGE = "amount_in_valid_range"
KEY_ACCOUNT_IBAN_INVALID = "account_iban_invalid"
KEY_ACCOUNT_IBAN_NOT_FROM_CH_OR_LI = "account_iban_not_from_ch_or_li"

KEY_REF_INVALID = "ref_invalid"
KEY_REF_TYPE_INVALID = "ref_type_invalid"
KEY_QR_REF_MISSING = "qr_ref_missing"
KEY_CRED_REF_INVALID_USE_FOR_QR_IBAN = "cred_ref_invalid_use_for_qr_iban"
KEY_QR_REF_INVALID_USE_FOR_NON_QR_IBAN = "qr_ref_invalid_use_for_non_qr_iban"

KEY_ADDITIONAL_INFO_TOO_LONG = "additional_info_too_long"
KEY_ALT_SCHEME_MAX_EXCEEDED = "alt_scheme_max_exceed"
KEY_DATE_OUTSIDE_VALID_RANGE = "date_in_valid_range"

# =============================================================================
# Limits
# =============================================================================

SUPPORTED_CURRENCIES = ("CHF", "EUR")
SUPPORTED_IBAN_COUNTRIES = ("CH", "LI")

MIN_AMOUNT = "0.01"
MAX_AMOUNT = "999999999.99"

MAX_NAME_LENGTH = 70
MAX_ADDRESS_LINE_LENGTH = 70
MAX_STREET_LENGTH = 70
MAX_HOUSE_NO_LENGTH = 16
MAX_POSTAL_CODE_LENGTH = 16
MAX_TOWN_LENGTH = 35

MAX_ADDITIONAL_INFO_LENGTH = 140
MAX_ALTERNATIVE_SCHEMES = 2
MAX_ALTERNATIVE_SCHEME_LENGTH = 100

# Swico dates carry a two-digit year
MIN_BILL_INFO_YEAR = 2000
MAX_BILL_INFO_YEAR = 2099

# QR-IBAN institution identifiers (IID) live in this reserved range
QR_IID_MIN = 30000
QR_IID_MAX = 31999
