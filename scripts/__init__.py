"""Database seeding and validation scripts.

| Script | Purpose |
|--------|---------|
| `seed_mongo.py` | Flattens the quiz source file and seeds MongoDB |
| `validate_seed.py` | Verifies seed integrity against the source file |

Usage::

    seed-quiz-data --source data/sample-data.json
    validate-seed --expect-dev-user
"""
