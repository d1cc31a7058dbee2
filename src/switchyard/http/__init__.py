"""HTTP primitives: request, response, headers, query, cookies, forms, body decoding."""
