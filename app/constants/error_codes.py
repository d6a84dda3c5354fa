# app/constants/error_codes.py

from enum import Enum


class ErrorCode(str, Enum):
    # Generic
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    UNAUTHORIZED = "UNAUTHORIZED"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    INTERNAL_ERROR = "INTERNAL_ERROR"

    # Transactions / storage
    CONCURRENT_UPDATE = "CONCURRENT_UPDATE"
    STORAGE_UNAVAILABLE = "STORAGE_UNAVAILABLE"

    # Categories
    CATEGORY_NOT_FOUND = "CATEGORY_NOT_FOUND"
    CATEGORY_NAME_REQUIRED = "CATEGORY_NAME_REQUIRED"
    CATEGORY_NAME_EXISTS = "CATEGORY_NAME_EXISTS"

    # Pouches
    POUCH_NOT_FOUND = "POUCH_NOT_FOUND"

    # Inventory items
    ITEM_NOT_FOUND = "ITEM_NOT_FOUND"
    ITEM_NAME_REQUIRED = "ITEM_NAME_REQUIRED"
    ITEM_CATEGORY_REQUIRED = "ITEM_CATEGORY_REQUIRED"
    ITEM_SKU_EXISTS = "ITEM_SKU_EXISTS"
    INSUFFICIENT_STOCK = "INSUFFICIENT_STOCK"

    # Repair jobs
    JOB_NOT_FOUND = "JOB_NOT_FOUND"
    JOB_FIELD_REQUIRED = "JOB_FIELD_REQUIRED"
