"""CLI Commands"""

import os
import sys

from commitcraft.config import Config, load_config, save_config, get_config_path
from commitcraft.output import bold, dim, info, print_success


def display_config() -> int:
    """Display current configuration."""
    config = load_config()
    config_path = get_config_path()

    print(f"\n{bold('Current Configuration')}\n")

    if config_path:
        print(f"  {dim('Loaded from:')} {config_path}")
    else:
        print(f"  {dim('Loaded from:')} defaults (no .commitcraftrc found)")

    overrides = {name: os.environ.get(name) for name in ('COMMITCRAFT_PROVIDER', 'COMMITCRAFT_MODEL', 'OPENAI_BASE_URL')}
    overrides = {name: value for name, value in overrides.items() if value}
    if overrides:
        print(f"  {dim('Environment overrides:')}")
        for name, value in overrides.items():
            print(f"    {name}={value}")

    print()
    print(f"  {bold('Settings:')}")
    print(f"    provider:           {info(config.provider)}")
    print(f"    model:              {info(config.model or 'auto')}")
    print(f"    base_url:           {info(config.base_url or 'default')}")
    print(f"    style:              {info(config.style)}")
    print(f"    include_body:       {info(str(config.include_body).lower())}")
    print(f"    max_subject_length: {info(str(config.max_subject_length))}")
    print(f"    language:           {info(config.language)}")

    print(f"\n  {dim('Config locations:')}")
    print(f"    Local:  .commitcraftrc (in current directory)")
    print(f"    Global: ~/.commitcraftrc")
    print(f"\n  {dim('Run')} commitcraft config --setup {dim('to configure')}\n")

    return 0


def run_setup() -> int:
    """Quick setup wizard."""
    display_config()
    print(f"{bold('Setup Wizard')}\n")

    print("Choose provider:\n")
    print("  1. Ollama (free, local)")
    print("  2. Claude API (paid)")
    print("  3. OpenAI-compatible API\n")

    providers = {'1': 'ollama', '2': 'claude', '3': 'openai'}
    while True:
        choice = input("Select [1/2/3]: ").strip()
        if choice in providers:
            provider = providers[choice]
            break

    model = None
    base_url = None
    if provider == 'ollama':
        print(f"\nRecommended: llama3.2:3b, gemma3:4b, mistral:7b\n")
        model = input("Model (Enter for default): ").strip() or None
        base_url = input("Host (Enter for http://localhost:11434): ").strip() or None
    elif provider == 'openai':
        base_url = input("\nBase URL (Enter for api.openai.com): ").strip() or None
        model = input("Model (Enter for default): ").strip() or None

    print("\nCommit message style:\n")
    print("  1. conventional - type(scope): subject with bullets (default)")
    print("  2. simple - plain subject with bullets")
    print("  3. detailed - type(scope): subject with more bullets\n")

    styles = {'': 'conventional', '1': 'conventional', '2': 'simple', '3': 'detailed'}
    while True:
        choice = input("Select [1/2/3] (Enter for default): ").strip()
        if choice in styles:
            style = styles[choice]
            break

    print("\nInclude bullet points in commit body? [Y/n]: ", end='')
    include_body = input().strip().lower() != 'n'

    print("\nMax subject line length (Enter for 50): ", end='')
    max_len_input = input().strip()
    max_subject_length = int(max_len_input) if max_len_input.isdigit() else 50

    print("\nMessage language (Enter for English): ", end='')
    language = input().strip() or "English"

    config = Config(
        provider=provider,
        model=model,
        base_url=base_url,
        style=style,
        include_body=include_body,
        max_subject_length=max_subject_length,
        language=language,
    )
    path = save_config(config, global_config=True)

    print_success(f"Saved to {path}")
    return 0


def run_install_completion() -> int:
    """Install shell tab completion."""
    shell = os.environ.get('SHELL', '')
    line = 'eval "$(register-python-argcomplete commitcraft)"'

    print(f"\n{bold('Tab Completion Setup')}\n")

    if 'zsh' in shell or 'bash' in shell:
        rc_file = os.path.expanduser('~/.zshrc' if 'zsh' in shell else '~/.bashrc')
        print(f"Add this line to {dim(rc_file)}:\n")
        print(f"  {line}\n")
        print(f"Then run: {dim('source ' + rc_file)}")
    elif sys.platform == 'win32':
        print("For PowerShell, run:\n")
        print("  register-python-argcomplete --shell powershell commitcraft | Out-String | Invoke-Expression\n")
        print("To make it permanent, add it to your $PROFILE.")
    else:
        print("Run one of these based on your shell:\n")
        print(f"  {dim('# Bash/Zsh')}")
        print(f"  {line}\n")
        print(f"  {dim('# Fish')}")
        print("  register-python-argcomplete --shell fish commitcraft | source")

    print(f"\n{dim('After setup, press TAB to autocomplete commands and flags.')}")
    return 0
