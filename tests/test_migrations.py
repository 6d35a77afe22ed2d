import sqlalchemy as sa

from lms.migrations import downgrade_base, upgrade_head


def test_upgrade_and_downgrade(tmp_path, monkeypatch):
    url = f"sqlite:///{tmp_path / 'migrated.db'}"
    monkeypatch.setenv('DATABASE_URL', url)

    upgrade_head()
    engine = sa.create_engine(url)
    inspector = sa.inspect(engine)
    tables = set(inspector.get_table_names())
    assert {'user', 'course', 'module', 'lesson', 'quiz', 'question', 'quiz_response', 'lesson_progress'} <= tables
    indexes = {ix['name'] for ix in inspector.get_indexes('quiz_response')}
    assert 'ix_quiz_response_completed_at' in indexes

    downgrade_base()
    assert 'quiz_response' not in sa.inspect(engine).get_table_names()
    engine.dispose()


def test_init_db_creates_completed_at_index():
    from lms.db import engine

    indexes = {ix['name'] for ix in sa.inspect(engine).get_indexes('quiz_response')}
    assert 'ix_quiz_response_completed_at' in indexes
