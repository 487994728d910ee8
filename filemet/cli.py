"""
filemet CLI - 표현식으로 파일 구조 만들기

사용법:
    # 경로 미리보기
    filemet parse "components/{Header.jsx,Footer.jsx} + utils/helpers.js"

    # 현재 폴더에 생성 (파일을 지정하면 그 상위 폴더)
    filemet create "src/{main.ts,utils.ts}" --target ./app

    # 프레임워크 템플릿 / 저장한 표현식으로 생성
    filemet create --template python-fastapi --target ./service
    filemet create --custom custom_1718000000000_ab12cd34e

    # 커스텀 표현식 관리
    filemet custom add "React component" "{index.ts,Component.tsx,Component.test.tsx}" --tags react,ui
    filemet custom export --output backup.json
    filemet custom import backup.json --mode replace

    # HTTP 서버
    filemet serve --port 8000
"""

import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from filemet.config import load_config, resolve_store_path
from filemet.core.parser import parse_structure
from filemet.core.structure import create_structure, resolve_target_dir
from filemet.domain.constants import IMPORT_MODE_MERGE, IMPORT_MODES
from filemet.domain.errors import ExpressionStoreError, ExpressionSyntaxError, StructureError
from filemet.domain.schemas import TemplateCategory
from filemet.templates.catalog import get_template_by_id, get_templates_by_category
from filemet.templates.manager import CustomExpressionManager

logger = logging.getLogger(__name__)


def _store(args: argparse.Namespace) -> CustomExpressionManager:
    if args.store:
        return CustomExpressionManager(Path(args.store))
    return CustomExpressionManager(resolve_store_path(load_config()))


def _split_tags(value: str | None) -> list[str]:
    if not value:
        return []
    return [tag.strip() for tag in value.split(",") if tag.strip()]


def _resolve_expression(args: argparse.Namespace) -> str | None:
    """인자/템플릿/커스텀 중 하나에서 표현식 결정."""
    if args.expression and (args.template or args.custom):
        source = "--template" if args.template else "--custom"
        print(f"Give either an expression or {source}, not both", file=sys.stderr)
        return None

    if args.template:
        template = get_template_by_id(args.template)
        if template is None:
            logger.error(f"Template not found: {args.template}")
            return None
        return template.expression

    if args.custom:
        try:
            expr = _store(args).get_expression(args.custom)
        except ExpressionStoreError as e:
            print(e.message, file=sys.stderr)
            return None
        if expr is None:
            logger.error(f"Custom expression not found: {args.custom}")
            return None
        return expr.expression

    if not args.expression:
        logger.error("Expression required (or use --template / --custom)")
        return None
    return args.expression


# =============================================================================
# Commands
# =============================================================================


def cmd_parse(args: argparse.Namespace) -> int:
    try:
        paths = parse_structure(args.expression)
    except ExpressionSyntaxError as e:
        print(e.user_message, file=sys.stderr)
        return 1

    for path in paths:
        print(path)
    return 0


def cmd_create(args: argparse.Namespace) -> int:
    expression = _resolve_expression(args)
    if expression is None:
        return 1

    try:
        paths = parse_structure(expression)
    except ExpressionSyntaxError as e:
        print(e.user_message, file=sys.stderr)
        return 1

    if args.dry_run:
        logger.info("DRY-RUN 모드 (실제 생성 없음)")
        for path in paths:
            print(path)
        return 0

    try:
        target_dir = resolve_target_dir(Path(args.target))
        result = create_structure(target_dir, paths)
    except StructureError as e:
        print(e.message, file=sys.stderr)
        return 1

    for path in result.created_files:
        print(f"+ {path}")
    print(result.summary())
    return 0


def cmd_templates(args: argparse.Namespace) -> int:
    for template in get_templates_by_category(args.category):
        print(f"{template.id:<20} [{template.category.value}] {template.name}")
    return 0


def cmd_custom(args: argparse.Namespace) -> int:
    store = _store(args)

    try:
        if args.custom_command == "list":
            expressions = (
                store.list_by_category(args.category) if args.category else store.list_expressions()
            )
            for expr in expressions:
                print(f"{expr.id}  [{expr.category}] {expr.name}: {expr.expression}")

        elif args.custom_command == "search":
            for expr in store.search(args.query):
                print(f"{expr.id}  [{expr.category}] {expr.name}: {expr.expression}")

        elif args.custom_command == "add":
            if not args.force:
                parse_structure(args.expression)
            saved = store.save_expression(
                name=args.name,
                expression=args.expression,
                description=args.description,
                category=args.category,
                tags=_split_tags(args.tags),
            )
            print(saved.id)

        elif args.custom_command == "remove":
            if not store.delete_expression(args.id):
                print(f"Custom expression not found: {args.id}", file=sys.stderr)
                return 1

        elif args.custom_command == "export":
            data = store.export_json()
            if args.output:
                Path(args.output).write_text(data, encoding="utf-8")
                logger.info(f"Exported expressions to {args.output}")
            else:
                print(data)

        elif args.custom_command == "import":
            data = Path(args.file).read_text(encoding="utf-8")
            count = store.import_json(data, mode=args.mode)
            print(f"Successfully imported {count} expressions!")

    except ExpressionSyntaxError as e:
        print(e.user_message, file=sys.stderr)
        return 1
    except ExpressionStoreError as e:
        print(e.message, file=sys.stderr)
        return 1
    except UnicodeDecodeError as e:
        print(f"Failed to read {args.file}: not UTF-8 ({e.reason})", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"File error: {e}", file=sys.stderr)
        return 1

    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("filemet.app.main:app", host=args.host, port=args.port)
    return 0


# =============================================================================
# Entry Point
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="filemet",
        description="한 줄 표현식으로 파일/폴더 구조 만들기",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="DEBUG 로그 출력")
    parser.add_argument("--store", type=str, help="커스텀 표현식 JSON 경로 (기본: 설정값)")
    sub = parser.add_subparsers(dest="command", required=True)

    p_parse = sub.add_parser("parse", help="표현식 → 경로 목록 출력")
    p_parse.add_argument("expression")
    p_parse.set_defaults(func=cmd_parse)

    p_create = sub.add_parser("create", help="파일/폴더 생성")
    p_create.add_argument("expression", nargs="?")
    p_create.add_argument("--target", default=".", help="생성 기준 폴더 (기본: 현재 폴더)")
    source = p_create.add_mutually_exclusive_group()
    source.add_argument("--template", help="프레임워크 템플릿 id")
    source.add_argument("--custom", help="커스텀 표현식 id")
    p_create.add_argument("--dry-run", action="store_true", help="생성 없이 경로만 출력")
    p_create.set_defaults(func=cmd_create)

    p_templates = sub.add_parser("templates", help="프레임워크 템플릿 목록")
    p_templates.add_argument("--category", choices=[c.value for c in TemplateCategory])
    p_templates.set_defaults(func=cmd_templates)

    p_custom = sub.add_parser("custom", help="커스텀 표현식 관리")
    custom_sub = p_custom.add_subparsers(dest="custom_command", required=True)

    c_list = custom_sub.add_parser("list")
    c_list.add_argument("--category")

    c_search = custom_sub.add_parser("search")
    c_search.add_argument("query")

    c_add = custom_sub.add_parser("add")
    c_add.add_argument("name")
    c_add.add_argument("expression")
    c_add.add_argument("--description", default="")
    c_add.add_argument("--category", default="")
    c_add.add_argument("--tags", help="쉼표 구분 (예: react,ui)")
    c_add.add_argument("--force", action="store_true", help="구문 검사 생략")

    c_remove = custom_sub.add_parser("remove")
    c_remove.add_argument("id")

    c_export = custom_sub.add_parser("export")
    c_export.add_argument("--output", help="저장 파일 (기본: stdout)")

    c_import = custom_sub.add_parser("import")
    c_import.add_argument("file")
    c_import.add_argument("--mode", choices=IMPORT_MODES, default=IMPORT_MODE_MERGE)

    p_custom.set_defaults(func=cmd_custom)

    p_serve = sub.add_parser("serve", help="HTTP API 서버 실행")
    p_serve.add_argument("--host", default="127.0.0.1")
    p_serve.add_argument("--port", type=int, default=8000)
    p_serve.set_defaults(func=cmd_serve)

    return parser


def main(argv: list[str] | None = None) -> int:
    load_dotenv()

    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    code: int = args.func(args)
    return code


if __name__ == "__main__":
    sys.exit(main())
