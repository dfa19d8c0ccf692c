"""
Tests for backend selection and the local-backend entity stores.
"""
import json

import pytest

from freeexperience.modules.marketplace.domain.models.actor import IdentityRecord, UserRole
from freeexperience.modules.marketplace.domain.models.application import Application
from freeexperience.modules.marketplace.domain.models.article import Article
from freeexperience.modules.marketplace.domain.models.project import Project, ProjectStatus
from freeexperience.modules.marketplace.domain.models.specialist import SpecialistProfile, Specialization
from freeexperience.modules.marketplace.domain.repositories.filters import (
    ApplicationFilter,
    ArticleFilter,
    ProjectFilter,
    SpecialistFilter,
)
from freeexperience.modules.marketplace.domain.services.schema_reconciler import RecordVariant, denormalize
from freeexperience.modules.marketplace.infrastructure import BackendKind, build_dual_backend_store, build_local_store
from freeexperience.modules.marketplace.infrastructure.remote import SupabaseGateway
from freeexperience.shared.config.settings import Settings
from freeexperience.shared.config.supabase import SupabaseManager
from freeexperience.shared.core.exceptions import AuthenticationError, ConflictError, StorageQuotaExceededError
from freeexperience.shared.infrastructure.storage import LocalKeyValueStore


class TestBackendSelection:

    def test_unconfigured_settings_select_local(self, settings, local_kv):
        store = build_dual_backend_store(settings, local_store=local_kv)

        assert store.kind == BackendKind.LOCAL
        assert not store.is_remote
        assert store.gateway is None

    def test_injected_gateway_selects_remote(self, settings, gateway):
        store = build_dual_backend_store(settings, gateway=gateway)

        assert store.is_remote
        assert store.gateway is gateway

    def test_configured_settings_select_supabase(self, settings):
        configured = settings.model_copy(update={
            "SUPABASE_URL": "https://project.supabase.co",
            "SUPABASE_ANON_KEY": "anon-key",
        })

        store = build_dual_backend_store(configured)

        assert store.kind == BackendKind.REMOTE
        assert isinstance(store.gateway, SupabaseGateway)

    def test_unusable_remote_falls_back_to_local(self, settings, local_kv):
        configured = settings.model_copy(update={
            "SUPABASE_URL": "https://project.supabase.co",
            "SUPABASE_ANON_KEY": "anon-key",
        })
        unconfigured_manager = SupabaseManager(settings)

        store = build_dual_backend_store(configured, local_store=local_kv, supabase=unconfigured_manager)

        assert store.kind == BackendKind.LOCAL


class TestLocalSessionStore:

    async def test_register_activates_account(self, local_backend, records):
        identity = await local_backend.sessions.register("Ivan@Mail.ru", "secret1", UserRole.SPECIALIST, "Иван")

        assert identity.email == "ivan@mail.ru"
        assert identity.name == "Иван"
        assert (await local_backend.sessions.read()).id == identity.id
        assert "passwordHash" not in records.read_object("user")

    async def test_passwords_are_stored_hashed(self, local_backend, records):
        await local_backend.sessions.register("a@mail.ru", "secret1", UserRole.SPECIALIST, "A")

        account = records.read_list("users")[0]
        assert "password" not in account
        assert account["passwordHash"] != "secret1"

    async def test_duplicate_email_is_a_conflict(self, local_backend):
        await local_backend.sessions.register("a@mail.ru", "secret1", UserRole.SPECIALIST, "A")

        with pytest.raises(ConflictError):
            await local_backend.sessions.register("A@mail.ru", "other12", UserRole.COMPANY, "B")

    async def test_authenticate_checks_password(self, local_backend):
        await local_backend.sessions.register("a@mail.ru", "secret1", UserRole.SPECIALIST, "A")
        await local_backend.sessions.clear()

        with pytest.raises(AuthenticationError):
            await local_backend.sessions.authenticate("a@mail.ru", "wrong")
        assert await local_backend.sessions.read() is None

        identity = await local_backend.sessions.authenticate("a@mail.ru", "secret1")
        assert (await local_backend.sessions.read()).id == identity.id

    async def test_plaintext_password_is_upgraded_on_sign_in(self, local_backend, records):
        records.write_json("users", [
            {"id": "old-1", "email": "old@mail.ru", "name": "Старый", "password": "secret1", "type": "company"}
        ])

        identity = await local_backend.sessions.authenticate("old@mail.ru", "secret1")

        assert identity.role == UserRole.COMPANY
        account = records.read_list("users")[0]
        assert "password" not in account
        assert "passwordHash" in account
        assert (await local_backend.sessions.authenticate("old@mail.ru", "secret1")).id == "old-1"

    async def test_write_updates_account_and_session(self, local_backend):
        identity = await local_backend.sessions.register("a@mail.ru", "secret1", UserRole.SPECIALIST, "A")

        updated = await local_backend.sessions.write(IdentityRecord(
            id=identity.id, email=identity.email, name="Новое имя", role=UserRole.SPECIALIST
        ))

        assert updated.name == "Новое имя"
        assert (await local_backend.sessions.read()).name == "Новое имя"


class TestLocalSpecialistStore:

    async def test_write_then_read(self, local_backend, records):
        profile = SpecialistProfile(id="s1", first_name="Анна", specialization=Specialization.SMM)

        await local_backend.specialists.write(profile)

        stored = records.read_object("specialistProfile:s1")
        assert stored["firstName"] == "Анна"
        assert (await local_backend.specialists.read("s1")).specialization == Specialization.SMM

    async def test_reading_another_id_leaves_legacy_profile_alone(self, local_backend, records):
        records.write_json("specialistProfile", {"name": "Иван Петров", "bio": "legacy"})

        assert await local_backend.specialists.read("no-such-id") is None

        assert records.read_object("specialistProfile")["bio"] == "legacy"
        assert records.read_object("specialistProfile:no-such-id") is None

    async def test_owner_claims_legacy_profile(self, local_backend, records):
        records.write_json("specialistProfile", {"name": "Иван Петров", "specialization": "SMM"})

        claimed = await local_backend.specialists.claim_legacy_profile("user-1")

        assert claimed.id == "user-1"
        assert claimed.first_name == "Иван"
        assert claimed.last_name == "Петров"
        assert records.read_object("specialistProfile") is None
        assert records.read_object("specialistProfile:user-1")["firstName"] == "Иван"
        assert [p.id for p in await local_backend.specialists.list()] == ["user-1"]

    async def test_owner_with_profile_does_not_claim(self, local_backend, records):
        await local_backend.specialists.write(SpecialistProfile(id="user-1", first_name="Анна"))
        records.write_json("specialistProfile", {"name": "Иван Петров"})

        assert await local_backend.specialists.claim_legacy_profile("user-1") is None
        assert (await local_backend.specialists.read("user-1")).first_name == "Анна"
        assert records.read_object("specialistProfile") is not None

    async def test_directory_quota_failure_leaves_no_profile(self):
        profile = SpecialistProfile(id="s1", first_name="Анна", bio="Иллюстрации")
        record = json.dumps(denormalize(profile, RecordVariant.LOCAL_SPLIT_NAME), ensure_ascii=False)
        kv = LocalKeyValueStore(quota_bytes=len("specialistProfile:s1") + len(record) + 5)
        backend = build_local_store(kv)

        with pytest.raises(StorageQuotaExceededError):
            await backend.specialists.write(profile)

        assert kv.keys() == []
        assert await backend.specialists.read("s1") is None

    async def test_failed_overwrite_restores_previous_profile(self, local_backend, monkeypatch):
        await local_backend.specialists.write(SpecialistProfile(id="s1", first_name="Анна"))

        def directory_full(*args, **kwargs):
            raise StorageQuotaExceededError(key="specialists")

        monkeypatch.setattr(local_backend.specialists.records, "upsert", directory_full)

        with pytest.raises(StorageQuotaExceededError):
            await local_backend.specialists.write(SpecialistProfile(id="s1", first_name="Борис"))

        assert (await local_backend.specialists.read("s1")).first_name == "Анна"

    async def test_directory_counters_are_kept(self, local_backend, records):
        await local_backend.specialists.write(SpecialistProfile(id="s1", first_name="Анна"))
        records.write_json("specialists", [{"id": "s1", "firstName": "Анна", "rating": 4.8, "hiredCount": 7}])

        profile = await local_backend.specialists.read("s1")

        assert profile.rating == 4.8
        assert profile.hired_count == 7

    async def test_missing_profile_reads_none(self, local_backend):
        assert await local_backend.specialists.read("nobody") is None

    async def test_list_and_exists_use_filters(self, local_backend):
        await local_backend.specialists.write(SpecialistProfile(id="s1", first_name="Анна"))
        await local_backend.specialists.write(
            SpecialistProfile(id="s2", first_name="Борис", visible_in_search=False)
        )

        visible = await local_backend.specialists.list(SpecialistFilter(visible_in_search=True))

        assert [p.id for p in visible] == ["s1"]
        assert await local_backend.specialists.exists(SpecialistFilter(ids=("s2",)))
        assert not await local_backend.specialists.exists(SpecialistFilter(ids=("s3",)))


class TestLocalProjectAndApplicationStores:

    async def test_malformed_project_is_skipped(self, local_backend, local_kv):
        local_kv.set_item("projects", json.dumps([
            {"id": "p1", "title": "Лендинг", "status": "open", "ownerId": "c1"},
            "garbage",
            {"id": "p2", "title": "Старый", "status": "closed", "applicationsCount": -4},
        ]))

        projects = await local_backend.projects.list()

        assert [p.id for p in projects] == ["p1", "p2"]
        assert projects[1].status == ProjectStatus.COMPLETED
        assert projects[1].application_count == 0

    async def test_project_write_assigns_id_and_timestamp(self, local_backend):
        saved = await local_backend.projects.write(Project(id="", owner_id="c1", title="Лого"))

        assert saved.id
        assert saved.created_at is not None
        assert (await local_backend.projects.read(saved.id)).title == "Лого"
        assert await local_backend.projects.list(ProjectFilter(owner_id="other")) == []

    async def test_count_by_project(self, local_backend):
        for project_id, applicant in (("p1", "s1"), ("p1", "s2"), ("p2", "s1")):
            await local_backend.applications.write(
                Application(id="", project_id=project_id, applicant_id=applicant, message="Привет")
            )

        counts = await local_backend.applications.count_by_project(["p1", "p2", "p3"])

        assert counts == {"p1": 2, "p2": 1, "p3": 0}
        assert await local_backend.applications.exists(ApplicationFilter(project_id="p2", applicant_id="s1"))
        assert not await local_backend.applications.exists(
            ApplicationFilter(project_id="p2", applicant_id="s2")
        )

    async def test_assets_are_inlined(self, local_backend):
        url = await local_backend.assets.upload("specialists/s1/a.png", b"\x89PNG", "image/png")

        assert url.startswith("data:image/png;base64,")


class TestLocalArticleStore:

    async def test_write_uses_camel_case_layout(self, local_backend, records):
        saved = await local_backend.articles.write(
            Article(id="", author_id="s1", title="Резюме", content="текст", image_url="https://cdn.test/a.png")
        )

        assert saved.id
        assert saved.created_at is not None
        stored = records.read_list("articles")[0]
        assert stored["authorId"] == "s1"
        assert stored["imageUrl"] == "https://cdn.test/a.png"
        assert (await local_backend.articles.read(saved.id)).title == "Резюме"

    async def test_rewrite_keeps_created_at(self, local_backend):
        saved = await local_backend.articles.write(Article(id="a1", author_id="s1", title="Первая версия"))

        rewritten = await local_backend.articles.write(saved.model_copy(update={"title": "Вторая версия"}))

        assert rewritten.created_at == saved.created_at
        assert [a.title for a in await local_backend.articles.list()] == ["Вторая версия"]

    async def test_malformed_article_is_skipped(self, local_backend, local_kv):
        local_kv.set_item("articles", json.dumps([
            {"id": "a1", "title": "Гайд", "authorId": "s1"},
            "garbage",
        ]))

        articles = await local_backend.articles.list(ArticleFilter(author_id="s1"))

        assert [a.id for a in articles] == ["a1"]
        assert await local_backend.articles.read("missing") is None


class TestLocalCompanyStore:

    async def test_ensure_keeps_existing_name(self, local_backend):
        identity = await local_backend.sessions.register("co@mail.ru", "secret1", UserRole.COMPANY, "Ромашка")

        name = await local_backend.companies.ensure(identity.id, "co@mail.ru", "Другое имя")

        assert name == "Ромашка"
        assert await local_backend.companies.read_name(identity.id) == "Ромашка"

    async def test_unknown_company_has_no_name(self, local_backend):
        assert await local_backend.companies.read_name("missing") is None
