"""Invite redemption: claim atomicity, compensation and provisioning."""

import asyncio
from uuid import uuid4

import pytest
from sqlalchemy import func
from sqlalchemy.exc import OperationalError
from sqlmodel import select

from src.rosterhub.core.providers.identity import AccountOutcome, DatabaseIdentityProvider
from src.rosterhub.models import (
    InviteStatus,
    Organization,
    OrganizationRole,
    Parent,
    ParentInvite,
    RoleGrantStatus,
    User,
    UserOrganizationRole,
)
from src.rosterhub.schemas.parent_invite import ParentInviteAcceptRequest
from src.rosterhub.services.parent_invite_service import (
    InviteFailureReason,
    ParentInviteService,
)
from tests.factories import (
    OrganizationFactory,
    ParentFactory,
    ParentInviteFactory,
    UserFactory,
    UserOrganizationRoleFactory,
)
from tests.helpers import (
    FixedIdentityProvider,
    FlakyIdentityProvider,
    RaisingIdentityProvider,
)

pytestmark = [pytest.mark.integration, pytest.mark.asyncio]


def accept_request(code: str, email: str | None = None, **overrides: str):
    body = {
        "code": code,
        "email": email or f"parent_{uuid4().hex[:8]}@example.com",
        "first_name": "Jamie",
        "last_name": "Rivera",
        "password": "s3cure-passw0rd",
    }
    body.update(overrides)
    return ParentInviteAcceptRequest(**body)


def make_service(session, identity=None) -> ParentInviteService:
    return ParentInviteService(session, identity or DatabaseIdentityProvider(session))


async def add_invite(db_session, organization: Organization, **kwargs) -> ParentInvite:
    invite = ParentInviteFactory.build(organization_id=organization.id, **kwargs)
    db_session.add(invite)
    await db_session.commit()
    return invite


async def invite_status(session_factory, invite_id) -> str:
    async with session_factory() as session:
        result = await session.execute(
            select(ParentInvite.status).where(ParentInvite.id == invite_id)
        )
        return result.scalar_one()


async def count(session_factory, model, *criteria) -> int:
    async with session_factory() as session:
        result = await session.execute(select(func.count()).select_from(model).where(*criteria))
        return result.scalar_one()


class TestAcceptInviteHappyPath:
    async def test_creates_account_parent_and_role(
        self, db_session, session_factory, organization
    ):
        invite = await add_invite(db_session, organization)

        async with session_factory() as session:
            result = await make_service(session).accept_invite(
                organization.id, accept_request(invite.code, email="new.parent@example.com")
            )

        assert result.success
        assert result.http_status == 200
        assert await invite_status(session_factory, invite.id) == InviteStatus.ACCEPTED.value

        async with session_factory() as session:
            user = (
                await session.execute(select(User).where(User.id == result.user_id))
            ).scalar_one()
            parent = (
                await session.execute(select(Parent).where(Parent.id == result.parent_id))
            ).scalar_one()
            grant = (
                await session.execute(
                    select(UserOrganizationRole).where(
                        UserOrganizationRole.user_id == user.id,
                        UserOrganizationRole.organization_id == organization.id,
                    )
                )
            ).scalar_one()
            accepted = (
                await session.execute(select(ParentInvite).where(ParentInvite.id == invite.id))
            ).scalar_one()

        assert user.email == "new.parent@example.com"
        assert parent.user_id == user.id
        assert parent.organization_id == organization.id
        assert (parent.first_name, parent.last_name) == ("Jamie", "Rivera")
        assert grant.role == OrganizationRole.PARENT.value
        assert grant.status == RoleGrantStatus.ACTIVE.value
        assert accepted.accepted_at is not None


class TestAcceptInviteRejections:
    async def test_unknown_code(self, session_factory, organization):
        async with session_factory() as session:
            result = await make_service(session).accept_invite(
                organization.id, accept_request("does-not-exist")
            )
        assert result.reason is InviteFailureReason.INVALID_CODE
        assert result.http_status == 400

    async def test_code_from_another_organization_is_invalid(
        self, db_session, session_factory, organization
    ):
        other = OrganizationFactory.build()
        db_session.add(other)
        await db_session.commit()
        invite = await add_invite(db_session, other)

        async with session_factory() as session:
            result = await make_service(session).accept_invite(
                organization.id, accept_request(invite.code)
            )

        assert result.reason is InviteFailureReason.INVALID_CODE
        assert await invite_status(session_factory, invite.id) == InviteStatus.PENDING.value

    async def test_expired_invite(self, db_session, session_factory, organization):
        invite = ParentInviteFactory.expired(organization_id=organization.id)
        db_session.add(invite)
        await db_session.commit()

        async with session_factory() as session:
            result = await make_service(session).accept_invite(
                organization.id, accept_request(invite.code)
            )

        assert result.reason is InviteFailureReason.EXPIRED
        assert result.http_status == 410
        assert await invite_status(session_factory, invite.id) == InviteStatus.PENDING.value
        assert await count(session_factory, User) == 0

    async def test_revoked_invite(self, db_session, session_factory, organization):
        invite = ParentInviteFactory.revoked(organization_id=organization.id)
        db_session.add(invite)
        await db_session.commit()

        async with session_factory() as session:
            result = await make_service(session).accept_invite(
                organization.id, accept_request(invite.code)
            )

        assert result.reason is InviteFailureReason.REVOKED
        assert result.http_status == 410

    async def test_already_accepted_invite(self, db_session, session_factory, organization):
        invite = ParentInviteFactory.accepted(organization_id=organization.id)
        db_session.add(invite)
        await db_session.commit()

        async with session_factory() as session:
            result = await make_service(session).accept_invite(
                organization.id, accept_request(invite.code)
            )

        assert result.reason is InviteFailureReason.ALREADY_ACCEPTED
        assert result.http_status == 409

    async def test_registered_email_keeps_invite_consumed(
        self, db_session, session_factory, organization
    ):
        existing = UserFactory.build(email="taken@example.com")
        db_session.add(existing)
        await db_session.commit()
        invite = await add_invite(db_session, organization)

        async with session_factory() as session:
            result = await make_service(session).accept_invite(
                organization.id, accept_request(invite.code, email="Taken@Example.com")
            )

        assert result.reason is InviteFailureReason.EMAIL_REGISTERED
        assert result.http_status == 409
        assert "already registered" in (result.error or "")
        assert await invite_status(session_factory, invite.id) == InviteStatus.ACCEPTED.value
        assert await count(session_factory, Parent) == 0


class TestConcurrentClaims:
    async def test_fifty_simultaneous_submissions_admit_one(
        self, db_session, session_factory, organization
    ):
        invite = await add_invite(db_session, organization)

        async def submit(i: int):
            async with session_factory() as session:
                return await make_service(session).accept_invite(
                    organization.id,
                    accept_request(invite.code, email=f"racer{i}@example.com"),
                )

        results = await asyncio.gather(*(submit(i) for i in range(50)))

        winners = [r for r in results if r.success]
        losers = [r for r in results if not r.success]
        assert len(winners) == 1
        assert len(losers) == 49
        assert all(r.reason is InviteFailureReason.ALREADY_ACCEPTED for r in losers)

        assert await count(session_factory, User) == 1
        assert await count(session_factory, Parent) == 1
        assert (
            await count(
                session_factory,
                UserOrganizationRole,
                UserOrganizationRole.organization_id == organization.id,
            )
            == 1
        )


class TestClaimCompensation:
    async def test_transient_account_failure_releases_claim(
        self, db_session, session_factory, organization
    ):
        invite = await add_invite(db_session, organization)

        async with session_factory() as session:
            identity = FlakyIdentityProvider(DatabaseIdentityProvider(session), failures=1)
            service = make_service(session, identity)

            first = await service.accept_invite(organization.id, accept_request(invite.code))
            assert first.reason is InviteFailureReason.ACCOUNT_CREATION_FAILED
            assert first.http_status == 500
            assert await invite_status(session_factory, invite.id) == InviteStatus.PENDING.value

            second = await service.accept_invite(organization.id, accept_request(invite.code))

        assert second.success
        assert identity.calls == 2
        assert await invite_status(session_factory, invite.id) == InviteStatus.ACCEPTED.value

    async def test_parent_step_failure_is_logged_and_not_rolled_back(
        self, db_session, session_factory, organization, capturing_logger, monkeypatch
    ):
        invite = await add_invite(db_session, organization)

        async def broken_link(*args, **kwargs):
            raise OperationalError("INSERT INTO parents", {}, Exception("disk I/O error"))

        async with session_factory() as session:
            service = make_service(session)
            monkeypatch.setattr(service, "_link_or_create_parent", broken_link)
            result = await service.accept_invite(organization.id, accept_request(invite.code))

        assert result.reason is InviteFailureReason.PROVISIONING_FAILED
        assert result.error == "Failed to create parent record"
        assert await invite_status(session_factory, invite.id) == InviteStatus.ACCEPTED.value

        incomplete = [
            call.kwargs
            for call in capturing_logger.calls
            if call.kwargs.get("event") == "invite_provisioning_incomplete"
        ]
        assert len(incomplete) == 1
        assert incomplete[0]["step"] == "parent"
        assert incomplete[0]["invite_id"] == str(invite.id)

    async def test_database_error_during_account_creation_releases_claim(
        self, db_session, session_factory, organization, monkeypatch
    ):
        invite = await add_invite(db_session, organization)

        async def dropped_connection(email):
            raise OperationalError("SELECT users", {}, Exception("connection reset"))

        async with session_factory() as session:
            identity = DatabaseIdentityProvider(session)
            monkeypatch.setattr(identity.user_repo, "get_by_email", dropped_connection)
            first = await make_service(session, identity).accept_invite(
                organization.id, accept_request(invite.code)
            )

        assert first.reason is InviteFailureReason.ACCOUNT_CREATION_FAILED
        assert first.http_status == 500
        assert await invite_status(session_factory, invite.id) == InviteStatus.PENDING.value

        async with session_factory() as session:
            second = await make_service(session).accept_invite(
                organization.id, accept_request(invite.code)
            )

        assert second.success
        assert await invite_status(session_factory, invite.id) == InviteStatus.ACCEPTED.value

    async def test_raising_identity_provider_releases_claim_and_propagates(
        self, db_session, session_factory, organization
    ):
        invite = await add_invite(db_session, organization)
        identity = RaisingIdentityProvider(
            OperationalError("INSERT INTO users", {}, Exception("statement timeout"))
        )

        async with session_factory() as session:
            with pytest.raises(OperationalError):
                await make_service(session, identity).accept_invite(
                    organization.id, accept_request(invite.code)
                )

        assert identity.calls == 1
        assert await invite_status(session_factory, invite.id) == InviteStatus.PENDING.value

        async with session_factory() as session:
            retry = await make_service(session).accept_invite(
                organization.id, accept_request(invite.code)
            )
        assert retry.success

    async def test_lost_claim_on_live_pending_invite_is_retryable(
        self, db_session, session_factory, organization, monkeypatch
    ):
        invite = await add_invite(db_session, organization)

        async def released_underneath(invite_id, now):
            return False

        async with session_factory() as session:
            service = make_service(session)
            monkeypatch.setattr(service.invite_repo, "claim", released_underneath)
            result = await service.accept_invite(organization.id, accept_request(invite.code))

        assert result.reason is InviteFailureReason.CLAIM_FAILED
        assert result.http_status == 500
        assert await invite_status(session_factory, invite.id) == InviteStatus.PENDING.value


class TestParentProfileLinking:
    async def test_links_existing_profile_case_insensitively(
        self, db_session, session_factory, organization
    ):
        profile = ParentFactory.build(
            organization_id=organization.id,
            email="Linked.Parent@Example.com",
            first_name="Old",
            last_name="Name",
            relationship="Mother",
            student_name="Alex Rivera",
        )
        db_session.add(profile)
        await db_session.commit()
        invite = await add_invite(db_session, organization)

        async with session_factory() as session:
            result = await make_service(session).accept_invite(
                organization.id, accept_request(invite.code, email="linked.parent@example.com")
            )

        assert result.success
        assert result.parent_id == profile.id
        async with session_factory() as session:
            linked = (
                await session.execute(select(Parent).where(Parent.id == profile.id))
            ).scalar_one()
        assert linked.user_id == result.user_id
        assert (linked.first_name, linked.last_name) == ("Jamie", "Rivera")
        assert linked.relationship == "Mother"
        assert linked.student_name == "Alex Rivera"
        assert await count(session_factory, Parent) == 1

    async def test_deleted_profile_is_not_linked(self, db_session, session_factory, organization):
        profile = ParentFactory.build(
            organization_id=organization.id,
            email="returning@example.com",
            deleted_at=organization.created_at,
        )
        db_session.add(profile)
        await db_session.commit()
        invite = await add_invite(db_session, organization)

        async with session_factory() as session:
            result = await make_service(session).accept_invite(
                organization.id, accept_request(invite.code, email="returning@example.com")
            )

        assert result.success
        assert result.parent_id != profile.id
        assert await count(session_factory, Parent) == 2

    async def test_profile_linked_to_another_account_is_not_relinked(
        self, db_session, session_factory, organization
    ):
        owner = UserFactory.build(email="first.owner@example.com")
        db_session.add(owner)
        await db_session.commit()
        profile = ParentFactory.build(
            organization_id=organization.id,
            email="shared@example.com",
            user_id=owner.id,
        )
        db_session.add(profile)
        await db_session.commit()
        invite = await add_invite(db_session, organization)

        async with session_factory() as session:
            result = await make_service(session).accept_invite(
                organization.id, accept_request(invite.code, email="shared@example.com")
            )

        assert result.success
        assert result.parent_id != profile.id
        async with session_factory() as session:
            kept = (
                await session.execute(select(Parent.user_id).where(Parent.id == profile.id))
            ).scalar_one()
        assert kept == owner.id
        assert await count(session_factory, Parent) == 2


class TestRoleGrant:
    async def test_revoked_grant_is_reactivated_with_invite_role(
        self, db_session, session_factory, organization
    ):
        user = UserFactory.build()
        db_session.add(user)
        await db_session.flush()
        db_session.add(
            UserOrganizationRoleFactory.revoked(
                user_id=user.id,
                organization_id=organization.id,
                role=OrganizationRole.ALUMNI.value,
            )
        )
        await db_session.commit()
        invite = await add_invite(db_session, organization)

        async with session_factory() as session:
            identity = FixedIdentityProvider(AccountOutcome.CREATED, user_id=user.id)
            result = await make_service(session, identity).accept_invite(
                organization.id, accept_request(invite.code, email=user.email)
            )

        assert result.success
        async with session_factory() as session:
            grant = (
                await session.execute(
                    select(UserOrganizationRole).where(UserOrganizationRole.user_id == user.id)
                )
            ).scalar_one()
        assert grant.status == RoleGrantStatus.ACTIVE.value
        assert grant.role == OrganizationRole.PARENT.value

    async def test_active_grant_is_left_unchanged(
        self, db_session, session_factory, organization
    ):
        user = UserFactory.build()
        db_session.add(user)
        await db_session.flush()
        db_session.add(
            UserOrganizationRoleFactory.admin(user_id=user.id, organization_id=organization.id)
        )
        await db_session.commit()
        invite = await add_invite(db_session, organization)

        async with session_factory() as session:
            identity = FixedIdentityProvider(AccountOutcome.CREATED, user_id=user.id)
            result = await make_service(session, identity).accept_invite(
                organization.id, accept_request(invite.code, email=user.email)
            )

        assert result.success
        async with session_factory() as session:
            grants = (
                (
                    await session.execute(
                        select(UserOrganizationRole).where(
                            UserOrganizationRole.user_id == user.id
                        )
                    )
                )
                .scalars()
                .all()
            )
        assert len(grants) == 1
        assert grants[0].role == OrganizationRole.ADMIN.value
        assert grants[0].status == RoleGrantStatus.ACTIVE.value
