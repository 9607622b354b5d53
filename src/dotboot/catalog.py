"""Default item sets and config blocks installed by dotboot."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from .types import ConfigPatch

DEFAULT_PACKAGES = ("zsh", "git", "curl", "wget", "tree", "htop", "jq")

DEFAULT_PLUGINS = {
    "zsh-autosuggestions": "https://github.com/zsh-users/zsh-autosuggestions",
    "zsh-syntax-highlighting": "https://github.com/zsh-users/zsh-syntax-highlighting.git",
    "zsh-completions": "https://github.com/zsh-users/zsh-completions",
}

DEFAULT_EXTENSIONS = (
    "esbenp.prettier-vscode",
    "formulahendry.docker-explorer",
    "formulahendry.docker-extension-pack",
    "golang.go",
    "ms-python.python",
    "ms-python.debugpy",
    "ms-python.vscode-pylance",
    "nextfaze.json-parse-stringify",
    "waderyan.gitblame",
)

OH_MY_ZSH_MARKER = "export ZSH="

OH_MY_ZSH_BLOCK = """
# Basic Oh My Zsh Configuration
export ZSH="$HOME/.oh-my-zsh"

# No theme (basic)
ZSH_THEME=""

# Essential plugins only
plugins=(
{plugins}
)

# Load Oh My Zsh
source $ZSH/oh-my-zsh.sh

# Basic completions
autoload -U compinit && compinit

# Basic prompt if no theme
if [ -z "$ZSH_THEME" ]; then
    PROMPT='%n@%m %~ %# '
fi
"""


def oh_my_zsh_patch(zshrc: Path, plugins: Iterable[str]) -> ConfigPatch:
    names = ["git", *(name for name in plugins if name != "git")]
    rendered = "\n".join(f"    {name}" for name in names)
    return ConfigPatch(zshrc, OH_MY_ZSH_MARKER, OH_MY_ZSH_BLOCK.format(plugins=rendered))


def aliases_patch(rc_file: Path, aliases_file: Path) -> ConfigPatch:
    source_line = f'source "{aliases_file}"'
    return ConfigPatch(rc_file, source_line, f"\n# Source dotfiles aliases\n{source_line}\n")
