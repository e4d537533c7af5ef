from __future__ import annotations

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from backend.tourmap.main import app

REQUIRED_PATHS = [
    "/api/health",
    "/api/attractions",
    "/api/attractions/{attraction_id}",
    "/api/attractions/{attraction_id}/comments",
    "/api/attractions/ranking",
    "/api/attractions/rankings",
    "/api/user/attractions",
    "/api/auth/mobile",
    "/api/admin/attractions",
]


def main() -> int:
    schema = app.openapi()
    paths = schema.get("paths", {})

    missing = [path for path in REQUIRED_PATHS if path not in paths]
    if missing:
        for path in missing:
            print(f"[오류] OpenAPI 스펙에 {path} 경로가 없습니다.", file=sys.stderr)
        return 1

    print(f"OpenAPI 필수 경로 검증 완료 ({len(REQUIRED_PATHS)}개)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
