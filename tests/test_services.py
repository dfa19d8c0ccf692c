"""
Tests for the marketplace application services over both backends.
"""
import asyncio
from datetime import date, datetime, timezone

import pytest

from freeexperience.modules.marketplace.application.services import SpecialistSort, derive_display_name
from freeexperience.modules.marketplace.domain.models.actor import Actor, UserRole
from freeexperience.modules.marketplace.domain.models.article import Article, ArticleDraft
from freeexperience.modules.marketplace.domain.models.project import ProjectDraft, ProjectStatus
from freeexperience.modules.marketplace.domain.models.specialist import SpecialistProfile, Specialization
from freeexperience.shared.core.exceptions import (
    AuthenticationError,
    ConflictError,
    DuplicateApplicationError,
    NotFoundError,
    PermissionDeniedError,
    TransportFailureError,
    ValidationError,
)


def landing_draft(**overrides):
    data = {
        "title": "Лендинг для кофейни",
        "description": "Нужен одностраничный сайт",
        "skills": ["Веб-разработка", "Figma"],
    }
    data.update(overrides)
    return ProjectDraft(**data)


class TestDeriveDisplayName:

    @pytest.mark.parametrize("provided,email,role,expected", [
        ("  Иван   Петров ", "ivan@mail.ru", UserRole.SPECIALIST, "Иван Петров"),
        (None, "olga@mail.ru", UserRole.SPECIALIST, "olga"),
        ("", "hr@romashka.ru", UserRole.COMPANY, "Компания hr"),
    ])
    def test_never_the_full_email(self, provided, email, role, expected):
        assert derive_display_name(provided, email, role) == expected


class TestAuthServiceLocal:

    async def test_sign_up_creates_split_name_profile(self, local_context):
        actor = await local_context.auth.sign_up("ivan@mail.ru", "secret1", display_name="Иван Петров")

        assert actor.display_name == "Иван Петров"
        assert actor.email == "ivan@mail.ru"
        profile = await local_context.store.specialists.read(actor.id)
        assert profile.first_name == "Иван"
        assert profile.last_name == "Петров"
        assert profile.specialization == Specialization.DESIGN
        assert profile.contact_email == "ivan@mail.ru"

    async def test_sign_up_without_name_uses_email_local_part(self, local_context):
        actor = await local_context.auth.sign_up("Olga@Mail.ru", "secret1")

        assert actor.display_name == "olga"
        assert actor.email == "olga@mail.ru"

    async def test_company_sign_up(self, local_context):
        actor = await local_context.auth.sign_up("hr@romashka.ru", "secret1", role=UserRole.COMPANY)

        assert actor.is_company
        assert actor.display_name == "Компания hr"
        assert await local_context.store.specialists.read(actor.id) is None
        assert await local_context.store.companies.read_name(actor.id) == "Компания hr"

    async def test_specialist_sign_up_claims_legacy_profile(self, local_context, records):
        records.write_json("specialistProfile", {"name": "Иван Петров", "bio": "legacy"})

        actor = await local_context.auth.sign_up("ivan@mail.ru", "secret1", display_name="Ваня")

        profile = await local_context.store.specialists.read(actor.id)
        assert profile.first_name == "Иван"
        assert profile.bio == "legacy"
        assert actor.display_name == "Иван Петров"
        assert records.read_object("specialistProfile") is None

    async def test_company_never_takes_legacy_profile(self, local_context, records):
        records.write_json("specialistProfile", {"name": "Иван Петров", "bio": "legacy"})

        actor = await local_context.auth.sign_up("hr@romashka.ru", "secret1", role=UserRole.COMPANY)
        await local_context.resolver.resolve(force_refresh=True)

        assert records.read_object("specialistProfile")["bio"] == "legacy"
        assert records.read_object(f"specialistProfile:{actor.id}") is None

    async def test_short_password_is_rejected(self, local_context):
        with pytest.raises(ValidationError) as exc_info:
            await local_context.auth.sign_up("a@mail.ru", "123")

        assert exc_info.value.details["field"] == "password"

    async def test_invalid_email_is_rejected(self, local_context):
        with pytest.raises(ValidationError):
            await local_context.auth.sign_up("not-an-email", "secret1")

    async def test_duplicate_email(self, local_context):
        await local_context.auth.sign_up("a@mail.ru", "secret1")

        with pytest.raises(ConflictError):
            await local_context.auth.sign_up("A@mail.ru", "secret2")

    async def test_sign_out_then_sign_in(self, local_context):
        created = await local_context.auth.sign_up("a@mail.ru", "secret1", display_name="Аня")

        await local_context.auth.sign_out()
        assert local_context.resolver.current_actor is None

        with pytest.raises(AuthenticationError):
            await local_context.auth.sign_in("a@mail.ru", "wrong-password")

        actor = await local_context.auth.sign_in("a@mail.ru", "secret1")
        assert actor.id == created.id
        assert actor.display_name == "Аня"


class TestProfileService:

    async def test_save_profile_updates_current_actor(self, local_context):
        actor = await local_context.auth.sign_up("a@mail.ru", "secret1", display_name="Аня")

        saved = await local_context.profiles.save_profile(actor, {
            "first_name": "Анна",
            "last_name": "Смирнова",
            "specialization": "SMM",
            "bio": "Веду соцсети",
            "rating": 5.0,
        })

        assert saved.full_name == "Анна Смирнова"
        assert saved.specialization == Specialization.SMM
        assert saved.rating == 0.0
        assert local_context.resolver.current_actor.display_name == "Анна Смирнова"
        assert (await local_context.profiles.get_specialist(actor.id)).bio == "Веду соцсети"

    async def test_blank_first_name_is_rejected(self, local_context):
        actor = await local_context.auth.sign_up("a@mail.ru", "secret1", display_name="Аня")

        with pytest.raises(ValidationError):
            await local_context.profiles.save_profile(actor, {"first_name": "   "})

    async def test_too_many_portfolio_items_are_rejected(self, local_context):
        actor = await local_context.auth.sign_up("a@mail.ru", "secret1", display_name="Аня")
        items = [{"id": str(n), "title": f"Проект {n}"} for n in range(4)]

        with pytest.raises(ValidationError) as exc_info:
            await local_context.profiles.save_profile(actor, {"portfolio_items": items})

        assert exc_info.value.details["field"] == "portfolio_items"

    async def test_companies_cannot_edit_profiles(self, local_context):
        company = Actor(id="c1", email="co@mail.ru", role=UserRole.COMPANY)

        with pytest.raises(PermissionDeniedError):
            await local_context.profiles.save_profile(company, {"first_name": "X"})

    async def test_list_specialists_filters_and_sorts(self, local_context):
        specialists = local_context.store.specialists
        await specialists.write(SpecialistProfile(
            id="s1", first_name="Анна", specialization=Specialization.SMM, hired_count=1
        ))
        await specialists.write(SpecialistProfile(
            id="s2", first_name="Борис", bio="Пишу лендинги", specialization=Specialization.WEB_DEVELOPMENT,
            hired_count=5,
        ))
        await specialists.write(SpecialistProfile(id="s3", first_name="Вера", visible_in_search=False))

        everyone = await local_context.profiles.list_specialists()
        assert [p.id for p in everyone] == ["s2", "s1"]

        by_bio = await local_context.profiles.list_specialists(query="ЛЕНДИНГ")
        assert [p.id for p in by_bio] == ["s2"]

        smm = await local_context.profiles.list_specialists(specialization=Specialization.SMM)
        assert [p.id for p in smm] == ["s1"]

        by_name = await local_context.profiles.list_specialists(include_hidden=True, sort_by=SpecialistSort.NAME)
        assert [p.id for p in by_name] == ["s1", "s2", "s3"]

    async def test_upload_asset_validates_images(self, local_context):
        actor = Actor(id="s1", email="a@mail.ru")

        url = await local_context.profiles.upload_asset(actor, "avatar.png", b"\x89PNG", "image/png")
        assert url.startswith("data:image/png;base64,")

        with pytest.raises(ValidationError):
            await local_context.profiles.upload_asset(actor, "notes.txt", b"hello", "text/plain")
        with pytest.raises(ValidationError):
            await local_context.profiles.upload_asset(actor, "empty.png", b"", "image/png")

    async def test_viewing_unknown_specialist_leaves_legacy_profile(self, local_context, records):
        records.write_json("specialistProfile", {"name": "Иван Петров", "bio": "legacy"})

        assert await local_context.profiles.get_specialist("no-such-id") is None
        assert records.read_object("specialistProfile")["bio"] == "legacy"
        assert records.read_object("specialistProfile:no-such-id") is None


class TestProjectsAndApplications:

    @pytest.fixture
    async def company(self, local_context):
        return await local_context.auth.sign_up(
            "hr@romashka.ru", "secret1", role=UserRole.COMPANY, display_name="Ромашка"
        )

    @pytest.fixture
    def specialist(self):
        return Actor(id="s1", email="anna@mail.ru", display_name="Анна")

    async def test_create_project(self, local_context, company):
        project = await local_context.projects.create_project(company, landing_draft())

        assert project.id
        assert project.owner_id == company.id
        assert project.company_name == "Ромашка"
        assert project.specialization == "Веб-разработка"
        assert project.status == ProjectStatus.OPEN
        assert project.full_description == "Нужен одностраничный сайт"

    async def test_specialization_defaults_without_skills(self, local_context, company):
        project = await local_context.projects.create_project(company, landing_draft(skills=[]))

        assert project.specialization == "Другое"

    async def test_past_deadline_is_rejected(self, local_context, company):
        with pytest.raises(ValidationError) as exc_info:
            await local_context.projects.create_project(company, landing_draft(deadline=date(2000, 1, 1)))

        assert exc_info.value.details["field"] == "deadline"

    async def test_missing_title_is_rejected(self, local_context, company):
        with pytest.raises(ValidationError):
            await local_context.projects.create_project(company, landing_draft(title="  "))

    async def test_specialists_cannot_post_projects(self, local_context, specialist):
        with pytest.raises(PermissionDeniedError):
            await local_context.projects.create_project(specialist, landing_draft())

    async def test_new_project_shows_up_in_cached_listing(self, local_context, company):
        assert await local_context.projects.list_projects() == []

        project = await local_context.projects.create_project(company, landing_draft())

        listed = await local_context.projects.list_projects()
        assert [p.id for p in listed] == [project.id]

    async def test_apply_updates_live_counts(self, local_context, company, specialist):
        project = await local_context.projects.create_project(company, landing_draft())
        await local_context.projects.list_projects()

        application = await local_context.applications.submit(specialist, project.id, "  Хочу помочь  ")

        assert application.message == "Хочу помочь"
        assert application.applicant_name == "Анна"
        assert application.project_title == "Лендинг для кофейни"
        assert (await local_context.projects.list_projects())[0].application_count == 1
        assert (await local_context.projects.get_project(project.id)).application_count == 1
        assert await local_context.applications.has_applied(project.id, specialist.id)

    async def test_second_application_is_a_duplicate(self, local_context, company, specialist):
        project = await local_context.projects.create_project(company, landing_draft())
        await local_context.applications.submit(specialist, project.id, "Первый отклик")

        with pytest.raises(DuplicateApplicationError):
            await local_context.applications.submit(specialist, project.id, "Второй отклик")

        assert len(await local_context.applications.list_for_project(project.id)) == 1

    async def test_apply_validation(self, local_context, company, specialist):
        project = await local_context.projects.create_project(company, landing_draft())

        with pytest.raises(ValidationError):
            await local_context.applications.submit(specialist, project.id, "   ")
        with pytest.raises(NotFoundError):
            await local_context.applications.submit(specialist, "missing", "Привет")
        with pytest.raises(PermissionDeniedError):
            await local_context.applications.submit(company, project.id, "Привет")

    async def test_stored_counts_are_kept_when_counting_fails(self, local_context, company, monkeypatch):
        project = await local_context.projects.create_project(company, landing_draft())

        async def offline(project_ids):
            raise TransportFailureError("offline", operation="count")

        monkeypatch.setattr(local_context.store.applications, "count_by_project", offline)

        listed = await local_context.projects.list_projects()
        assert [p.id for p in listed] == [project.id]
        assert listed[0].application_count == 0


class TestArticleService:

    @pytest.fixture
    def author(self):
        return Actor(id="s1", email="anna@mail.ru", display_name="Анна")

    async def test_create_article_fills_excerpt(self, local_context, author):
        content = "Первая строка\n" + "х" * 200

        article = await local_context.articles.create_article(
            author, ArticleDraft(title="  Как  составить резюме ", content=content)
        )

        assert article.id
        assert article.author_id == "s1"
        assert article.title == "Как составить резюме"
        assert article.excerpt == content[:150].replace("\n", " ") + "..."
        assert article.created_at is not None

    async def test_title_and_content_are_required(self, local_context, author):
        with pytest.raises(ValidationError) as exc_info:
            await local_context.articles.create_article(author, ArticleDraft(title="Заголовок", content="   "))

        assert exc_info.value.details["field"] == "content"
        assert await local_context.articles.list_articles() == []

    async def test_listing_is_newest_first_and_refreshed_after_writes(self, local_context, author):
        older = Article(id="a1", author_id="s1", title="Старая", content="текст",
                        created_at=datetime(2024, 1, 1, tzinfo=timezone.utc))
        newer = Article(id="a2", author_id="s1", title="Новая", content="текст",
                        created_at=datetime(2024, 6, 1, tzinfo=timezone.utc))
        await local_context.store.articles.write(older)
        await local_context.store.articles.write(newer)

        assert [a.id for a in await local_context.articles.list_articles()] == ["a2", "a1"]

        created = await local_context.articles.create_article(author, ArticleDraft(title="Свежая", content="текст"))

        assert (await local_context.articles.list_articles())[0].id == created.id

    async def test_only_the_author_edits(self, local_context, author):
        article = await local_context.articles.create_article(
            author, ArticleDraft(title="Черновик", content="текст", excerpt="Кратко")
        )
        assert (await local_context.articles.get_article(article.id)).title == "Черновик"
        stranger = Actor(id="s2", email="b@mail.ru")

        with pytest.raises(PermissionDeniedError):
            await local_context.articles.update_article(stranger, article.id, ArticleDraft(title="x", content="y"))
        with pytest.raises(NotFoundError):
            await local_context.articles.update_article(author, "missing", ArticleDraft(title="x", content="y"))

        updated = await local_context.articles.update_article(
            author, article.id, ArticleDraft(title="Готово", content="новый текст")
        )

        assert updated.excerpt == "новый текст..."
        assert (await local_context.articles.get_article(article.id)).title == "Готово"

    async def test_upload_cover_keeps_it_across_edits(self, local_context, author):
        article = await local_context.articles.create_article(author, ArticleDraft(title="С картинкой", content="текст"))

        covered = await local_context.articles.upload_cover(author, article.id, "cover.png", b"\x89PNG", "image/png")
        assert covered.image_url.startswith("data:image/png;base64,")

        edited = await local_context.articles.update_article(
            author, article.id, ArticleDraft(title="С картинкой", content="другой текст")
        )
        assert edited.image_url == covered.image_url

        with pytest.raises(ValidationError):
            await local_context.articles.upload_cover(author, article.id, "notes.txt", b"hello", "text/plain")


class TestRemoteServices:

    async def test_remote_sign_up_creates_profile_row(self, remote_context, gateway):
        actor = await remote_context.auth.sign_up("ivan@mail.ru", "secret1", display_name="Иван Петров")

        assert actor.display_name == "Иван Петров"
        row = gateway.tables["specialists"][0]
        assert row["id"] == actor.id
        assert row["first_name"] == "Иван"
        assert row["last_name"] == "Петров"

    async def test_remote_company_record_and_project(self, remote_context, gateway):
        company = await remote_context.auth.sign_up(
            "hr@romashka.ru", "secret1", role=UserRole.COMPANY, display_name="Ромашка"
        )

        row = gateway.tables["companies"][0]
        assert row["id"] == company.id
        assert row["company_name"] == "Ромашка"

        project = await remote_context.projects.create_project(company, landing_draft())
        listed = await remote_context.projects.list_projects()

        assert [p.id for p in listed] == [project.id]
        assert listed[0].company_name == "Ромашка"

    async def test_rls_rejection_does_not_fail_sign_up(self, remote_context, gateway, monkeypatch):
        async def rejected(table, row):
            raise PermissionDeniedError("row-level security")

        monkeypatch.setattr(gateway, "upsert", rejected)

        actor = await remote_context.auth.sign_up("a@mail.ru", "secret1", display_name="Аня")

        assert actor.display_name == "Аня"
        assert gateway.tables["specialists"] == []

    async def test_provider_auth_events_are_relayed(self, remote_context, gateway):
        await remote_context.start()
        await remote_context.auth.sign_up("a@mail.ru", "secret1", display_name="Аня")
        assert remote_context.resolver.current_actor is not None

        gateway.current_user_id = None
        gateway.emit("SIGNED_OUT", None)
        await asyncio.gather(*list(remote_context._pending_events))

        assert remote_context.resolver.current_actor is None

        await remote_context.close()
        assert gateway.auth_listeners == []

    async def test_remote_duplicate_application(self, remote_context, gateway):
        company = await remote_context.auth.sign_up("hr@romashka.ru", "secret1", role=UserRole.COMPANY)
        project = await remote_context.projects.create_project(company, landing_draft())
        specialist = Actor(id="s1", email="anna@mail.ru", display_name="Анна")

        await remote_context.applications.submit(specialist, project.id, "Привет")

        with pytest.raises(DuplicateApplicationError):
            await remote_context.applications.submit(specialist, project.id, "Ещё раз")
        assert len(gateway.tables["applications"]) == 1

    async def test_remote_article_lifecycle(self, remote_context, gateway):
        author = Actor(id="s1", email="anna@mail.ru", display_name="Анна")

        article = await remote_context.articles.create_article(
            author, ArticleDraft(title="Портфолио", content="Соберите лучшие работы")
        )

        row = gateway.tables["articles"][0]
        assert row["id"] == article.id
        assert row["author_id"] == "s1"
        assert row["excerpt"] == "Соберите лучшие работы..."

        covered = await remote_context.articles.upload_cover(author, article.id, "cover.jpg", b"jpeg", "image/jpeg")

        assert covered.image_url.endswith(".jpg")
        assert gateway.tables["articles"][0]["image_url"] == covered.image_url
        assert [a.id for a in await remote_context.articles.list_articles()] == [article.id]
