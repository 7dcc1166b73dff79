"""
Frobenius elements, generating primes and embeddings of Kummer extensions
of absolute number fields.
"""
