import pytest

from film_cli.cli.interactive import BrowseSession


@pytest.fixture
def session(film_server, write_catalog, make_manager, console):
    path = write_catalog(
        [{"id": 1, "title": "Film A", "url": str(film_server.make_url("/a.bin"))}]
    )
    return BrowseSession(make_manager(path), console)


@pytest.mark.asyncio
@pytest.mark.parametrize("line", ["q", "quit", "EXIT"])
async def test_quit_words_end_the_session(session, line):
    assert await session.dispatch(line) is False


@pytest.mark.asyncio
async def test_blank_and_unknown_lines_keep_the_session_going(session, console):
    assert await session.dispatch("   ") is True
    assert await session.dispatch("dance 3") is True
    assert "Unknown action" in console.file.getvalue()


@pytest.mark.asyncio
async def test_non_numeric_ids_are_refused(session, console, store):
    assert await session.dispatch("download [red]1") is True
    assert "is not a numeric id" in console.file.getvalue()
    assert await store.count() == 0


@pytest.mark.asyncio
async def test_download_play_and_delete_through_actions(session, store, launched, console):
    assert await session.dispatch("download 1") is True
    assert await store.count() == 1
    assert "#1: Download complete!" in console.file.getvalue()

    film_id = (await store.list_summaries())[0].id
    await session.dispatch(f"play {film_id}")
    assert len(launched) == 1

    await session.dispatch(f"rm {film_id}")
    assert await store.count() == 0


@pytest.mark.asyncio
async def test_play_of_unknown_id_prints_a_note(session, console, launched):
    await session.dispatch("p 77")
    assert launched == []
    assert "No saved film with id 77" in console.file.getvalue()
