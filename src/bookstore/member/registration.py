"""Member registration: command and handler."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import String
from protean.utils.globals import current_domain

from bookstore.domain import bookstore
from bookstore.member.member import Member


@bookstore.command(part_of="Member")
class RegisterMember:
    email: String(required=True, max_length=254)
    full_name: String(required=True, max_length=255)


@bookstore.command_handler(part_of=Member)
class RegisterMemberHandler:
    @handle(RegisterMember)
    def register_member(self, command):
        repo = current_domain.repository_for(Member)
        if repo.find_by_email(command.email):
            raise ValidationError({"email": [f"A member with email {command.email} already exists"]})

        member = Member.register(email=command.email, full_name=command.full_name)
        repo.add(member)
        return str(member.id)
