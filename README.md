# lsfiles

Building blocks for listing files on POSIX systems. The package reads
directories and caches each file's `lstat` result. It filters entries with
ignore globs and sorts them in natural order. It also sorts files into kinds by
name, looks up their Git status and lists their extended attributes.

## Installation

```
pip install .
```

## Example

```python
from lsfiles.dir import Dir, DotFilter
from lsfiles.filter import FileFilter, IgnorePatterns, SortCase, SortField, SortKind

listing = Dir.read_dir(".")
files = [f for f in listing.files(DotFilter.JUST_FILES) if not isinstance(f, OSError)]

patterns, errors = IgnorePatterns.parse_from_iter(["*.tmp"])
file_filter = FileFilter(
    sort_field=SortField(SortKind.NAME, SortCase.AaBbCc),
    list_dirs_first=True,
    ignore_patterns=patterns,
)
for f in file_filter.sort_files(file_filter.filter_child_files(files)):
    print(f.name)
```

## Modules

### `lsfiles.file`

`File` holds a path, its name, its lower-cased extension and its cached `lstat`
result. You can build one in three ways:

- `File.from_args(path, parent_dir, filename)` stats the path and raises `OSError` on failure.
- `File.new_aa_current(dir)` gives the `.` entry.
- `File.new_aa_parent(path, dir)` gives the `..` entry.

Type checks:

- `is_file`, `is_directory`, `is_link`, `is_pipe`, `is_socket`
- `is_char_device`, `is_block_device`, `is_executable_file`
- `points_to_directory`, which also follows symlinks.

Metadata:

- `permissions()` returns a `Permissions` value.
- `links()` returns `Links`. Its `multiple` flag is set only for regular files with more than one link.
- `inode()` and `user()` / `group()` return the inode number and the owner IDs.
- `blocks()` returns an int, or `None` for files that are neither regular nor links.
- `size()` returns the size in bytes, `DeviceIDs` for devices, or `None` for directories.
- `type_char()` returns a `FileType`.
- The timestamps are returned as `Time` values.

`link_target()` returns a `FileTarget`, and `is_broken()` tells whether it led
nowhere.

`get_source_files()` lists the paths whose existence marks a file as compiled
output. For example, `foo.css` is compiled from `foo.scss`, and `foo.js` from
`foo.ts`.

The static helpers `File.filename(path)` and `File.extension_of(path)` work on
paths alone.

### `lsfiles.dir`

`Dir.read_dir(path)` reads a directory once and raises `OSError` on failure.

`Dir.files(dots, git, git_ignoring)` yields a `File` for each visible entry. If
an entry cannot be statted, it yields the `OSError` in that entry's place.
`DotFilter` chooses what is shown:

- `JUST_FILES` shows no hidden files.
- `DOTFILES` shows dotfiles.
- `DOTFILES_AND_DOTS` shows dotfiles, with `.` and `..` first.

When `git_ignoring` is true, Git-ignored entries are skipped.

### `lsfiles.filter`

`FileFilter` has these methods, each of which returns a new list:

- `filter_child_files` and `filter_argument_files` drop names that match the ignore globs. `filter_child_files` can also keep directories only.
- `sort_files` sorts by a `SortField`. It can reverse the order and put directories first.

A `SortField` is a `SortKind`. The name, extension and mixed-hidden-name kinds
also take a `SortCase`: `ABCabc` for case-sensitive sorting, `AaBbCc` for
case-insensitive.

`natural_compare` and `natural_compare_ignore_case` compare runs of digits as
numbers, so `file9` sorts before `file10`.

`GlobPattern` supports `*`, `**`, `?`, `[...]` and `[!...]`. A malformed
pattern raises `PatternError`. `IgnorePatterns.parse_from_iter` returns the
valid patterns together with the errors.

### `lsfiles.filetype`

`FileExtensions.kind(file)` returns the first matching `FileKind`: temporary,
build file, image, video, music, lossless audio, crypto, document, compressed or
compiled. `FileKind.style` gives the terminal SGR parameters for that kind.

`icon_kind(file)` returns only the audio (`MUSIC`), image or video kind.

### `lsfiles.git`

`GitCache(paths)` finds the repositories above the given paths by running
`git rev-parse --show-toplevel`.

`get(path, prefix_lookup)` returns a `Git` value with the staged and unstaged
`GitStatus`. With `prefix_lookup` set, the status is aggregated over a whole
directory. The first lookup in each repository runs `git status` once, and the
result is cached. Paths outside any repository report as not modified.

`parse_porcelain` reads NUL-separated porcelain v1 output.

The `git` executable must be on `PATH`. If it is missing, paths are treated as
being outside any repository.

### `lsfiles.xattr`

`attributes(path)` and `symlink_attributes(path)` return the `Attribute`
entries (name and value size) whose values are not empty. `ENABLED` tells
whether the platform supports extended attributes. Where it does not, the lists
are empty.

### `lsfiles.dir_action`

`DirAction` describes what to do with a directory: list it as a file, list its
contents, or recurse into it. Recursing takes `RecurseOptions`, which sets tree
mode and an optional maximum depth.

### `lsfiles.logger`

`configure(value)` adds a coloured `[LEVEL name] message` handler on stderr.
Any non-empty value turns on debug output, and `"trace"` turns on the extra
`TRACE` level as well.

### `lsfiles.fields`

Value types used by the modules above:

- `FileType`, `Permissions`, `PermissionsPlus`, `OctalPermissions`
- `Links`, `Inode`, `DeviceIDs`, `User`, `Group`, `Time`
- `GitStatus`, `Git`

## What it does not do

This is a library only. It has no command-line program and no option parsing.
It does not render output either: there are no grid, line or detail views, no
column layout, and no user or group name lookup. Formatting and printing the
listing is left to the caller.

## Tests

```
pip install .[test]
pytest
```