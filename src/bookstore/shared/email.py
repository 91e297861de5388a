"""EmailAddress value object shared by members and notifications."""

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import String

from bookstore.domain import bookstore


@bookstore.value_object
class EmailAddress:
    """A structurally valid email address.

    Exactly one ``@``, non-empty local and domain parts, a dotted domain and no
    whitespace or consecutive dots.
    """

    address: String(required=True, max_length=254)

    @invariant.post
    def verify_email_address(self):
        email = self.address
        if not email:
            return
        error = ValidationError({"email": [f"Invalid email address: {email!r}"]})

        if any(ch in email for ch in (" ", "\t", "\n")):
            raise error

        if email.count("@") != 1:
            raise error

        local_part, domain_part = email.split("@", 1)

        if not local_part or local_part.startswith(".") or local_part.endswith("."):
            raise error

        if "." not in domain_part or domain_part.startswith(".") or domain_part.endswith("."):
            raise error

        if ".." in local_part or ".." in domain_part:
            raise error
