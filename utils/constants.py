"""
utils/constants.py

Purpose: Centralized static content

- All client-facing response messages
- Field names shared by both storage backends

(Prevents hardcoding across the codebase)
"""

# ============================================================
# SUCCESS MESSAGES
# ============================================================

USER_ADDED_MESSAGE = "User added successfully"
USER_UPDATED_MESSAGE = "User updated successfully"
USER_DELETED_MESSAGE = "User deleted successfully"

# ============================================================
# VALIDATION MESSAGES (400)
# ============================================================

MISSING_FIELDS_MESSAGE = "All fields required: name, age, city"
AGE_NOT_NUMBER_MESSAGE = "Age must be a number"
AGE_NEGATIVE_MESSAGE = "Age must be a non-negative number"
INVALID_BODY_MESSAGE = "Invalid request body"

# Largest age MongoDB can store (signed 64-bit int)
MAX_AGE = 2 ** 63 - 1

# ============================================================
# LOOKUP MESSAGES (404)
# ============================================================

USER_NOT_FOUND_MESSAGE = "User not found"

# ============================================================
# STORAGE FAILURE MESSAGES (500)
# Detail stays in the server log
# ============================================================

FETCH_USERS_ERROR_MESSAGE = "Error fetching users"
ADD_USER_ERROR_MESSAGE = "Error adding user"
UPDATE_USER_ERROR_MESSAGE = "Error updating user"
DELETE_USER_ERROR_MESSAGE = "Error deleting user"
INTERNAL_ERROR_MESSAGE = "An internal error occurred. Please try again later."

# ============================================================
# RECORD FIELDS
# ============================================================

CREATED_AT_FIELD = "createdAt"
UPDATED_AT_FIELD = "updatedAt"
