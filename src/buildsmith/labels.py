# src/buildsmith/labels.py
"""Build labels: the fully-qualified name of a rule.

Text forms:
    @repo//pkg:name   rule in an external repository
    //pkg:name        rule in the main repository
    :name             rule in the same package
"""

import re
from dataclasses import dataclass


_LABEL_RE = re.compile(
    r"^(?:@(?P<repo>[A-Za-z0-9_.-]+))?//(?P<pkg>[^:]*)(?::(?P<name>[^:]+))?$"
)
_RELATIVE_RE = re.compile(r"^:?(?P<name>[^:/@][^:]*)$")


@dataclass(frozen=True)
class Label:
    """A reference to a build rule."""

    repo: str = ""
    pkg: str = ""
    name: str = ""
    relative: bool = False

    def __str__(self) -> str:
        if self.relative:
            return f":{self.name}"
        repo = f"@{self.repo}" if self.repo else ""
        return f"{repo}//{self.pkg}:{self.name}"

    @classmethod
    def parse(cls, text: str) -> "Label":
        """Parse the text form of a label.

        `//pkg` without a name is shorthand for `//pkg:<last segment of pkg>`.

        Raises:
            ValueError: If the text is not a label
        """
        match = _LABEL_RE.match(text)
        if match:
            pkg = match.group("pkg")
            if pkg.startswith("/") or pkg.endswith("/"):
                xmsg = f"Invalid package path in label: {text!r}"
                raise ValueError(xmsg)
            name = match.group("name") or pkg.rsplit("/", 1)[-1]
            if not name:
                xmsg = f"Label has no rule name: {text!r}"
                raise ValueError(xmsg)
            return cls(repo=match.group("repo") or "", pkg=pkg, name=name)

        match = _RELATIVE_RE.match(text)
        if match:
            return cls(name=match.group("name"), relative=True)

        xmsg = f"Invalid label: {text!r}"
        raise ValueError(xmsg)
