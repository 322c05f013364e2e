"""Bundled documentation-philosophy template offered from the view toolbar."""

TEMPLATE_ORG = """#+TITLE: Documentation Philosophy
#+DATE: YYYY-MM-DD

* Purpose

This file sets the rules for how documentation in this repository is written
and kept current. Read it after README.org and before changing any other doc.

* Core Principles

** 1. Present state only

Documentation describes the system as it exists today.

| Do                               | Don't                               |
|----------------------------------+-------------------------------------|
| Describe what exists now         | Keep "Recent Changes" sections      |
| Write in the present tense       | Write "we added" or "previously"    |
| Delete references to dead code   | Leave "REMOVED in v2" markers       |

*Rationale*: history belongs in version control, not in the docs.

** 2. Layer discipline

| Layer           | Files                              | Purpose                       |
|-----------------+------------------------------------+-------------------------------|
| Strategic       | README.org, ARCHITECTURE.org       | Overview, navigation, choices |
| Quick Reference | */quick_reference.org              | Signatures, algorithms, lines |

Strategic docs stay lean and link to quick references instead of repeating them.

** 3. Structure over prose

| Prefer                 | Over              |
|------------------------+-------------------|
| Tables                 | Long paragraphs   |
| Bullet lists           | Run-on sentences  |
| Explicit relationships | ASCII diagrams    |

* File Structure

** Strategic files

Strategic files use =ALL_CAPS.org= names and live at the project root or one
directory below it. The doc map uses this convention to group files.

| File                        | Purpose                                  |
|-----------------------------+------------------------------------------|
| README.org                  | Entry point, quick start, links          |
| ARCHITECTURE.org            | System design and data flow              |
| DOCUMENTATION_PHILOSOPHY.org | These rules                             |

** Quick references

Each major module keeps a =quick_reference.org= next to its code with:
- [ ] Public entry points and their signatures
- [ ] Key algorithms, one short paragraph each
- [ ] File and line pointers, e.g. src/main.py:42

* Maintenance

** When code changes

1. Update the quick reference of every module you touched.
2. Update strategic docs only when architecture or navigation changed.
3. Delete stale content rather than annotating it.

** Review checklist

- [ ] No historical language
- [ ] Tables used where content is tabular
- [ ] Links between layers still resolve
"""
