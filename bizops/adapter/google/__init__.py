"""Google Sign-In adapter."""

from .verifier import GoogleIdentityVerifier, MockGoogleIdentityVerifier

__all__ = ["GoogleIdentityVerifier", "MockGoogleIdentityVerifier"]
