#!/usr/bin/env python3
"""
Console Save As Example

Runs the Save As workflow against a live network with a terminal
standing in for the editor: the upload-method dialog becomes a prompt,
alerts are printed.

Requires a funded MediToken account on the configured network:
  MEDISAVE_PRIVATE_KEY=0x... \
  MEDISAVE_SEPOLIA_TOKEN_CONTRACT=0x... \
  MEDISAVE_SEPOLIA_INVOICE_CONTRACT=0x... \
  MEDISAVE_LIGHTHOUSE_API_KEY=... \
  python examples/console_save_as.py "Blood Panel"

Run with: python examples/console_save_as.py <filename>
"""

import asyncio
import sys

from medisave import Settings, UploadMethod, create_orchestrator


class ConsoleEngine:
    """A one-cell 'spreadsheet'."""

    def __init__(self, text: str) -> None:
        self.text = text

    def get_serialized_content(self) -> str:
        return self.text

    def get_renderable_content(self) -> str:
        return f"<pre>{self.text}</pre>"

    def get_device_profile(self) -> str:
        return "default"

    def load_document(self, name: str, template_json: str) -> None:
        self.text = template_json


class ConsolePresenter:
    def __init__(self) -> None:
        self.method_prompt = asyncio.Event()
        self.setup_shown = False

    def show_method_choice(self, methods) -> None:
        print("Choose where to save: " + ", ".join(m.value for m in methods))
        self.method_prompt.set()

    def hide_method_choice(self) -> None:
        self.method_prompt.clear()

    def show_setup_required(self, method) -> None:
        print(f"{method.label} is not set up. Finish setup in the List Files section.")
        self.setup_shown = True

    def hide_setup_required(self) -> None:
        self.setup_shown = False

    def show_save_success(self, details) -> None:
        print(f"\nSaved {details.filename}")
        print(f"  CID: {details.cid}")
        print(f"  URL: {details.gateway_url}")

    def hide_save_success(self) -> None:
        pass

    def alert(self, message: str) -> None:
        print(f"[alert] {message}")

    def print_markup(self, markup: str) -> None:
        print(markup)

    def copy_to_clipboard(self, text: str) -> None:
        print(f"[clipboard] {text}")


async def main(filename: str) -> None:
    print("=" * 60)
    print("medisave - Save As")
    print("=" * 60)
    print()

    settings = Settings.from_env()
    presenter = ConsolePresenter()
    orchestrator = await create_orchestrator(
        ConsoleEngine("Hemoglobin 13.5 g/dL"),
        presenter,
        {"default": '{"sheet": "default"}'},
        settings=settings,
    )
    print(f"Network: {settings.network.value}")
    print(f"Balance: {orchestrator.balance_display} MediToken")
    print()

    task = asyncio.create_task(orchestrator.save_as(filename))
    await presenter.method_prompt.wait()

    loop = asyncio.get_running_loop()
    answer = (await loop.run_in_executor(None, input, "storacha/lighthouse [lighthouse]: ")).strip()
    if answer:
        orchestrator.resolve_upload_method(answer)
    else:
        orchestrator.resolve_upload_method(UploadMethod.LIGHTHOUSE)

    # Setup notice needs an acknowledgment before the workflow can end
    while not task.done():
        await asyncio.sleep(0.1)
        if presenter.setup_shown:
            orchestrator.acknowledge_setup()

    result = task.result()
    print()
    print(f"Balance: {orchestrator.balance_display} MediToken")
    if not result.ok:
        raise SystemExit(1)


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print(__doc__)
        raise SystemExit(2)
    asyncio.run(main(sys.argv[1]))
