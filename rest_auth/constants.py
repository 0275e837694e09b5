ERR_PASS_DONT_MATCH = "Passwords do not match."
ERR_USER_CREATION = "Failed to create account."
ERR_UNAUTHORIZED = "Not authorized."
ERR_JWT_EXPIRED = "Token has expired."
ERR_FIND_USER = "Account not found."
ERR_FIND_ADMIN = "Administrator not found."
ERR_NOT_FOUND = "Not Found"
ERR_INTERNAL = "Internal Server Error"

BANNER = "REST Server AUTH"
