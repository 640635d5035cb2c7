# src/pkg_soulnet/cli.py

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import replace
from typing import Any, Sequence

from .config.env import settings_from_env
from .integrations.common.client_factory import SoulNetClient, create_soulnet_client


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="soulnet",
        description="Call the community and Ark AI APIs and inspect the stored session",
    )
    parser.add_argument(
        "--store",
        help="JSON file holding the session token (default: env SOULNET_TOKEN_STORE).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log requests and session changes to stderr.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_token = sub.add_parser("token", help="Decode a bearer token and report its validity.")
    p_token.add_argument("token", nargs="?", help="Token to inspect (default: the stored one).")
    p_token.add_argument(
        "--within-minutes",
        type=int,
        default=30,
        help="Threshold for the expiring_soon flag.",
    )

    p_login = sub.add_parser("login", help="Log in and store the issued token.")
    p_login.add_argument("--username", "-u", required=True)
    p_login.add_argument("--password", "-p", required=True)

    p_register = sub.add_parser("register", help="Register a new user.")
    p_register.add_argument("--username", "-u", required=True)
    p_register.add_argument("--password", "-p", required=True)
    p_register.add_argument("--nickname", "-n", required=True)

    sub.add_parser("logout", help="Forget the stored token and username.")

    p_chat = sub.add_parser("chat", help="Send one message to the chat model.")
    p_chat.add_argument("message", nargs="?", help="Omit to let the assistant open the conversation.")
    p_chat.add_argument("--system", help="System prompt.")
    p_chat.add_argument("--image-url", help="Attach an image by URL.")

    p_image = sub.add_parser("image", help="Generate an image and print its URL.")
    p_image.add_argument("prompt")
    p_image.add_argument("--size", default="720x1280")
    p_image.add_argument("--seed", type=int)
    p_image.add_argument("--guidance-scale", type=float, default=2.5)
    p_image.add_argument("--watermark", action="store_true")

    return parser.parse_args(args=argv)


def _token_report(client: SoulNetClient, token: str | None, within_minutes: int) -> dict[str, Any]:
    session = client.session
    token = token or session.current_token
    if token is None:
        return {"token": None, "valid": False}

    claims = session.try_decode(token)
    validity = session.validity(token)
    return {
        "claims": dict(claims.raw) if claims else None,
        "valid": validity.is_valid,
        "remaining_seconds": validity.remaining_seconds,
        "expiring_soon": session.is_expiring_soon(token, within_minutes=within_minutes),
    }


async def _run(args: argparse.Namespace) -> dict[str, Any]:
    settings = settings_from_env()
    if args.store:
        settings = replace(settings, token_store_path=args.store)

    async with create_soulnet_client(settings) as client:
        if args.command == "token":
            return _token_report(client, args.token, args.within_minutes)

        if args.command == "login":
            response = await client.auth.login(args.username, args.password)
            return {"code": response.code, "msg": response.msg, "username": args.username}

        if args.command == "register":
            response = await client.auth.register(args.username, args.password, args.nickname)
            return {"code": response.code, "msg": response.msg, "data": response.data}

        if args.command == "logout":
            client.auth.sign_out()
            return {}

        if args.command == "chat":
            chat = client.require_chat()
            if args.message is None:
                reply = await chat.initiate_conversation(system_message=args.system)
            else:
                reply = await chat.send_message(
                    args.message,
                    image_url=args.image_url,
                    system_message=args.system,
                )
            return {"reply": reply}

        if args.command == "image":
            url = await client.require_images().generate_image(
                args.prompt,
                size=args.size,
                seed=args.seed,
                guidance_scale=args.guidance_scale,
                watermark=args.watermark,
            )
            return {"url": url}

    raise RuntimeError(f"Unknown command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        summary = asyncio.run(_run(args))
        json.dump({"ok": True, **summary}, sys.stdout, indent=2, ensure_ascii=False)
        sys.stdout.write("\n")
    except Exception as exc:  # noqa: BLE001
        json.dump(
            {"ok": False, "error": str(exc), "kind": getattr(exc, "kind", type(exc).__name__)},
            sys.stdout,
            indent=2,
            ensure_ascii=False,
        )
        sys.stdout.write("\n")
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
