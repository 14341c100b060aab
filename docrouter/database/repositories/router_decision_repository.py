from dataclasses import asdict

from psycopg.types.json import Jsonb

from docrouter.database.connection import get_connection
from docrouter.routing.models import RouterDecision


class RouterDecisionRepository:
    """Database operations for the router_decisions table.

    Expected schema::

        CREATE TABLE router_decisions (
            id BIGSERIAL PRIMARY KEY,
            decided_at TIMESTAMPTZ NOT NULL,
            tier TEXT NOT NULL,
            constants_version TEXT NOT NULL,
            profile JSONB NOT NULL,
            config JSONB NOT NULL,
            estimated_cost DOUBLE PRECISION NOT NULL,
            actual_cost DOUBLE PRECISION NOT NULL,
            estimated_time DOUBLE PRECISION NOT NULL,
            actual_time DOUBLE PRECISION NOT NULL,
            success BOOLEAN NOT NULL
        );
    """

    def insert(self, decision: RouterDecision) -> int:
        """Persist a decision and return its row id."""
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    INSERT INTO router_decisions
                    (decided_at, tier, constants_version, profile, config,
                     estimated_cost, actual_cost, estimated_time, actual_time, success)
                    VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                    RETURNING id
                    """,
                    (
                        decision.timestamp,
                        decision.config.tier.value,
                        decision.constants_version,
                        Jsonb(asdict(decision.profile)),
                        Jsonb(asdict(decision.config)),
                        decision.config.estimated_cost.total,
                        decision.actual_cost,
                        decision.config.estimated_time.total,
                        decision.actual_time,
                        decision.success,
                    ),
                )
                row = cur.fetchone()
            conn.commit()

        if row is None:
            raise RuntimeError("INSERT into router_decisions returned no id")
        return int(row[0])
