"""
Shell commands: one handler per command name.

"Short commands for long APIs. The terminal way." — schema.cx
"""

import os
from dataclasses import dataclass
from enum import Enum, unique
from typing import Any, Callable

from .git_utils import GitOperations
from .github_api import GitHubAPIError
from .interaction import (
    LineReader,
    collect_body,
    collect_fields,
    collect_multiline_body,
    confirm,
    prompt_choice,
)
from .models import ApiOperation
from .render import AUTH_REQUIRED_MESSAGE, ResultRenderer
from .rich_utils import print_error, print_info, print_plain, print_success
from .session import PreconditionError, Session
from .validation import (
    PROFILE_KEYS,
    ValidationError,
    parse_label_args,
    validate_github_name,
    validate_login_args,
    validate_number,
    validate_repository_args,
    validate_state_option,
)


class ShellExit(Exception):
    """Raised by the exit commands to leave the REPL."""

    pass


@dataclass
class CommandContext:
    """What every handler receives: the session plus terminal I/O."""

    session: Session
    reader: LineReader
    renderer: ResultRenderer


Handler = Callable[[CommandContext, str | None], None]


@unique
class Command(str, Enum):
    """Every command name the shell understands."""

    HELP = "?"
    EXIT = "exit"
    REPO = "repo"
    LOGIN = "login"
    LOADCFG = "loadcfg"
    CD = "cd"

    REPO_SHOW = "r.show"
    REPO_LIST = "r.list"
    REPO_SEARCH = "r.search"
    REPO_WATCH = "r.watch"
    REPO_UNWATCH = "r.unwatch"
    REPO_FORK = "r.fork"
    REPO_CREATE = "r.create"
    REPO_DELETE = "r.delete"
    REPO_SET_PRIVATE = "r.set_private"
    REPO_SET_PUBLIC = "r.set_public"
    REPO_NETWORK = "r.network"
    REPO_TAGS = "r.tags"
    REPO_BRANCHES = "r.branches"

    ISSUE_LIST = "i.list"
    ISSUE_VIEW = "i.view"
    ISSUE_SEARCH = "i.search"
    ISSUE_OPEN = "i.open"
    ISSUE_EDIT = "i.edit"
    ISSUE_CLOSE = "i.close"
    ISSUE_REOPEN = "i.reopen"
    ISSUE_LABEL = "i.label"
    ISSUE_COMMENT = "i.comment"

    USER_SEARCH = "u.search"
    USER_SHOW = "u.show"
    USER_UPDATE = "u.update"
    USER_FOLLOWERS = "u.followers"
    USER_FOLLOWING = "u.following"
    USER_FOLLOW = "u.follow"
    USER_UNFOLLOW = "u.unfollow"
    USER_PUB_KEYS = "u.pub_keys"
    USER_PUB_KEYS_ADD = "u.pub_keys.add"
    USER_PUB_KEYS_DEL = "u.pub_keys.del"

    COMMIT_BRANCH = "c.branch"
    COMMIT_FILE = "c.file"
    COMMIT_SHOW = "c.show"

    OBJECT_TREE = "o.tree"
    OBJECT_BLOB = "o.blob"
    OBJECT_RAW = "o.raw"

    NETWORK_META = "n.meta"
    NETWORK_DATA_CHUNK = "n.data_chunk"


ALIASES = {
    "h": Command.HELP,
    "q": Command.EXIT,
    "quit": Command.EXIT,
}

HELP_TEXT = """\
 command  argument          description
 repo     :user :repo       set owner/repo, eg: 'fayland perl-app-github'
 login    :login :token     authenticated as :login
 loadcfg                    authed by git config --global github.user|token
 ?,h                        help
 q,exit,quit                exit

Repos
 r.show                     more in-depth information for the :repo in repo
 r.list                     list out all the repositories for the :user in repo
 r.search WORD              Search Repositories
 r.watch                    watch repositories (authentication required)
 r.unwatch                  unwatch repositories (authentication required)
 r.fork                     fork a repository (authentication required)
 r.create                   create a new repository (authentication required)
 r.delete                   delete a repository (authentication required)
 r.set_private              set a public repo private (authentication required)
 r.set_public               set a private repo public (authentication required)
 r.network                  see all the forks of the repo
 r.tags                     tags on the repo
 r.branches                 list of remote branches

Issues
 i.list    open|closed      see a list of issues for a project
 i.view    :number          get data on an individual issue by number
 i.search  open|closed WORD Search issues
 i.open                     open a new issue (authentication required)
 i.edit    :number          edit an issue (authentication required)
 i.close   :number          close an issue (authentication required)
 i.reopen  :number          reopen an issue (authentication required)
 i.label   add|del :num :label
                            add/remove a label (authentication required)
 i.comment :number          leave a comment on an issue (authentication required)

Users
 u.search  WORD             search user
 u.show                     get extended information on user
 u.update                   update your users info (authentication required)
 u.followers
 u.following
 u.follow  :user            follow one user (authentication required)
 u.unfollow :user           unfollow one user (authentication required)
 u.pub_keys                 Public Key Management (authentication required)
 u.pub_keys.add
 u.pub_keys.del :number

Commits
 c.branch  :branch          list commits for a branch
 c.file    :branch :file    get all the commits that modified the file
 c.file    :file            (default branch 'master')
 c.show    :sha1            show a specific commit

Objects
 o.tree    :tree_sha1       get the contents of a tree by tree sha
 o.blob    :tree_sha1 :file get the data of a blob by tree sha and path
 o.raw     :sha1            get the data of a blob (tree, file or commits)

Network
 n.meta                     network meta
 n.data_chunk :net_hash     network data

File/Path related
 cd       PATH              chdir to PATH

Others
 r.show   :user :repo       more in-depth information for a repository
 r.list   :user             list out all the repositories for a user
 u.show   :user             get extended information on :user
"""


# ----------------------------
# API calls
# ----------------------------


def run_github(ctx: CommandContext, operation: ApiOperation, *args: Any) -> None:
    """
    Invoke ``operation`` on the session's client and print the outcome.

    Raises:
        PreconditionError: If the session has neither a repo nor credentials.
            The call is not attempted.
    """
    client = ctx.session.require_client()

    try:
        result = operation.bind(client)(*args)
    except GitHubAPIError as e:
        ctx.renderer.render_failure(e)
        return

    ctx.renderer.render_success(result, raw=operation.raw)


def run_github_with_repo(ctx: CommandContext, operation: ApiOperation, *args: Any) -> None:
    """Like ``run_github`` but also requires a selected repository."""
    ctx.session.require_repo()
    run_github(ctx, operation, *args)


def _require_write_access(ctx: CommandContext, needs_repo: bool = True) -> None:
    """
    Check the preconditions of a credentialed command before any prompt or call.

    Raises:
        PreconditionError: Without a client, without a selected repository
            (when ``needs_repo``), or without credentials
    """
    ctx.session.require_client()
    if needs_repo:
        ctx.session.require_repo()
    if not ctx.session.is_authenticated:
        raise PreconditionError(AUTH_REQUIRED_MESSAGE)


def _split_args(args: str | None, count: int, usage: str) -> list[str]:
    """Split ``args`` into exactly ``count`` whitespace-separated parts."""
    parts = (args or "").split(maxsplit=count - 1)
    if len(parts) != count:
        raise ValidationError(f"usage: {usage}")
    return parts


# ----------------------------
# Common
# ----------------------------


def show_help(ctx: CommandContext, args: str | None) -> None:
    print_plain(HELP_TEXT)


def exit_shell(ctx: CommandContext, args: str | None) -> None:
    raise ShellExit()


def set_repo(ctx: CommandContext, args: str | None) -> None:
    repo = validate_repository_args(args)
    ctx.session.select_repo(repo)


def set_login(ctx: CommandContext, args: str | None) -> None:
    credentials = validate_login_args(args)
    ctx.session.authenticate(credentials)
    print_success(f"Authenticated as {credentials.login}")


def set_loadcfg(ctx: CommandContext, args: str | None) -> None:
    credentials = GitOperations.read_github_credentials()
    if credentials is None:
        print_error("run git config --global github.user|token fails")
        return
    ctx.session.authenticate(credentials)
    print_success(f"Authenticated as {credentials.login}")


def change_directory(ctx: CommandContext, args: str | None) -> None:
    path = os.path.expanduser((args or "~").strip())
    try:
        os.chdir(path)
    except OSError as e:
        print_error(str(e))
        return
    print_info(os.getcwd(), prefix="📂")


# ----------------------------
# Repos
# ----------------------------


def repo_show(ctx: CommandContext, args: str | None) -> None:
    if args and args.strip():
        repo = validate_repository_args(args)
        run_github(ctx, ApiOperation.REPOS_SHOW, repo.owner, repo.name)
    else:
        run_github_with_repo(ctx, ApiOperation.REPOS_SHOW)


def repo_list(ctx: CommandContext, args: str | None) -> None:
    user = (args or "").strip()
    if user:
        run_github(ctx, ApiOperation.REPOS_LIST, validate_github_name(user))
    else:
        run_github(ctx, ApiOperation.REPOS_LIST)


def repo_search(ctx: CommandContext, args: str | None) -> None:
    (word,) = _split_args(args, 1, "r.search WORD")
    run_github(ctx, ApiOperation.REPOS_SEARCH, word)


def repo_watch(ctx: CommandContext, args: str | None) -> None:
    _require_write_access(ctx)
    run_github_with_repo(ctx, ApiOperation.REPOS_WATCH)


def repo_unwatch(ctx: CommandContext, args: str | None) -> None:
    _require_write_access(ctx)
    run_github_with_repo(ctx, ApiOperation.REPOS_UNWATCH)


def repo_fork(ctx: CommandContext, args: str | None) -> None:
    _require_write_access(ctx)
    run_github_with_repo(ctx, ApiOperation.REPOS_FORK)


def repo_create(ctx: CommandContext, args: str | None) -> None:
    _require_write_access(ctx, needs_repo=False)
    data = collect_fields(ctx.reader, ["name", "description", "homepage"])
    if not data["name"].strip():
        raise ValidationError("create repo failed. name is required")
    run_github(
        ctx,
        ApiOperation.REPOS_CREATE,
        data["name"].strip(),
        data["description"],
        data["homepage"],
        True,
    )


def repo_delete(ctx: CommandContext, args: str | None) -> None:
    _require_write_access(ctx)
    repo = ctx.session.require_repo()
    if not confirm(ctx.reader, f"Are you sure to delete {repo.full_name}? [YN]? "):
        return
    print_info("Deleting Repos ...")
    run_github_with_repo(ctx, ApiOperation.REPOS_DELETE)


def repo_set_private(ctx: CommandContext, args: str | None) -> None:
    _require_write_access(ctx)
    run_github_with_repo(ctx, ApiOperation.REPOS_SET_PRIVATE)


def repo_set_public(ctx: CommandContext, args: str | None) -> None:
    _require_write_access(ctx)
    run_github_with_repo(ctx, ApiOperation.REPOS_SET_PUBLIC)


def repo_network(ctx: CommandContext, args: str | None) -> None:
    run_github_with_repo(ctx, ApiOperation.REPOS_NETWORK)


def repo_tags(ctx: CommandContext, args: str | None) -> None:
    run_github_with_repo(ctx, ApiOperation.REPOS_TAGS)


def repo_branches(ctx: CommandContext, args: str | None) -> None:
    run_github_with_repo(ctx, ApiOperation.REPOS_BRANCHES)


# ----------------------------
# Issues
# ----------------------------


def issue_list(ctx: CommandContext, args: str | None) -> None:
    state = validate_state_option((args or "").strip() or "open")
    run_github_with_repo(ctx, ApiOperation.ISSUES_LIST, state)


def issue_view(ctx: CommandContext, args: str | None) -> None:
    number = validate_number(args, "i.view :number")
    run_github_with_repo(ctx, ApiOperation.ISSUES_VIEW, number)


def issue_search(ctx: CommandContext, args: str | None) -> None:
    state, word = _split_args(args, 2, "i.search open|closed WORD")
    run_github_with_repo(ctx, ApiOperation.ISSUES_SEARCH, validate_state_option(state), word)


def issue_open(ctx: CommandContext, args: str | None) -> None:
    _require_write_access(ctx)
    title, body = collect_multiline_body(ctx.reader, "title")
    run_github_with_repo(ctx, ApiOperation.ISSUES_OPEN, title, body)


def issue_edit(ctx: CommandContext, args: str | None) -> None:
    number = validate_number(args, "i.edit :number")
    _require_write_access(ctx)
    title, body = collect_multiline_body(ctx.reader, "title")
    run_github_with_repo(ctx, ApiOperation.ISSUES_EDIT, number, title, body)


def issue_close(ctx: CommandContext, args: str | None) -> None:
    number = validate_number(args, "i.close :number")
    _require_write_access(ctx)
    run_github_with_repo(ctx, ApiOperation.ISSUES_CLOSE, number)


def issue_reopen(ctx: CommandContext, args: str | None) -> None:
    number = validate_number(args, "i.reopen :number")
    _require_write_access(ctx)
    run_github_with_repo(ctx, ApiOperation.ISSUES_REOPEN, number)


def issue_label(ctx: CommandContext, args: str | None) -> None:
    action, number, label = parse_label_args(args)
    _require_write_access(ctx)
    if action == "add":
        run_github_with_repo(ctx, ApiOperation.ISSUES_ADD_LABEL, number, label)
    else:
        run_github_with_repo(ctx, ApiOperation.ISSUES_REMOVE_LABEL, number, label)


def issue_comment(ctx: CommandContext, args: str | None) -> None:
    number = validate_number(args, "i.comment :number")
    _require_write_access(ctx)
    body = collect_body(ctx.reader)
    run_github_with_repo(ctx, ApiOperation.ISSUES_COMMENT, number, body)


# ----------------------------
# Users
# ----------------------------


def user_search(ctx: CommandContext, args: str | None) -> None:
    (word,) = _split_args(args, 1, "u.search WORD")
    run_github(ctx, ApiOperation.USERS_SEARCH, word)


def user_show(ctx: CommandContext, args: str | None) -> None:
    user = (args or "").strip()
    if user:
        run_github(ctx, ApiOperation.USERS_SHOW, validate_github_name(user))
    else:
        run_github(ctx, ApiOperation.USERS_SHOW)


def user_update(ctx: CommandContext, args: str | None) -> None:
    _require_write_access(ctx, needs_repo=False)
    key = prompt_choice(ctx.reader, f"Key ({'/'.join(PROFILE_KEYS)}): ", PROFILE_KEYS)
    value = collect_fields(ctx.reader, ["value"])["value"]
    run_github(ctx, ApiOperation.USERS_UPDATE, key, value)


def user_followers(ctx: CommandContext, args: str | None) -> None:
    _require_write_access(ctx, needs_repo=False)
    run_github(ctx, ApiOperation.USERS_FOLLOWERS)


def user_following(ctx: CommandContext, args: str | None) -> None:
    _require_write_access(ctx, needs_repo=False)
    run_github(ctx, ApiOperation.USERS_FOLLOWING)


def user_follow(ctx: CommandContext, args: str | None) -> None:
    (user,) = _split_args(args, 1, "u.follow :user")
    _require_write_access(ctx, needs_repo=False)
    run_github(ctx, ApiOperation.USERS_FOLLOW, validate_github_name(user))


def user_unfollow(ctx: CommandContext, args: str | None) -> None:
    (user,) = _split_args(args, 1, "u.unfollow :user")
    _require_write_access(ctx, needs_repo=False)
    run_github(ctx, ApiOperation.USERS_UNFOLLOW, validate_github_name(user))


def user_pub_keys(ctx: CommandContext, args: str | None) -> None:
    _require_write_access(ctx, needs_repo=False)
    run_github(ctx, ApiOperation.USERS_PUB_KEYS)


def user_pub_keys_add(ctx: CommandContext, args: str | None) -> None:
    _require_write_access(ctx, needs_repo=False)
    data = collect_fields(ctx.reader, ["name", "key"])
    if not data["key"].strip():
        raise ValidationError("add key failed. key is required")
    run_github(ctx, ApiOperation.USERS_ADD_PUB_KEY, data["name"], data["key"].strip())


def user_pub_keys_del(ctx: CommandContext, args: str | None) -> None:
    key_id = validate_number(args, "u.pub_keys.del :number")
    _require_write_access(ctx, needs_repo=False)
    run_github(ctx, ApiOperation.USERS_REMOVE_PUB_KEY, key_id)


# ----------------------------
# Commits, objects, network
# ----------------------------


def commit_branch(ctx: CommandContext, args: str | None) -> None:
    branch = (args or "").strip() or "master"
    run_github_with_repo(ctx, ApiOperation.COMMITS_BRANCH, branch)


def commit_file(ctx: CommandContext, args: str | None) -> None:
    parts = (args or "").split(maxsplit=1)
    if not parts:
        raise ValidationError("usage: c.file [:branch] :file")
    if len(parts) == 1:
        branch, path = "master", parts[0]
    else:
        branch, path = parts
    run_github_with_repo(ctx, ApiOperation.COMMITS_FILE, branch, path.strip())


def commit_show(ctx: CommandContext, args: str | None) -> None:
    (sha,) = _split_args(args, 1, "c.show :sha1")
    run_github_with_repo(ctx, ApiOperation.COMMITS_SHOW, sha)


def object_tree(ctx: CommandContext, args: str | None) -> None:
    (sha,) = _split_args(args, 1, "o.tree :tree_sha1")
    run_github_with_repo(ctx, ApiOperation.OBJECTS_TREE, sha)


def object_blob(ctx: CommandContext, args: str | None) -> None:
    sha, path = _split_args(args, 2, "o.blob :tree_sha1 :file")
    run_github_with_repo(ctx, ApiOperation.OBJECTS_BLOB, sha, path)


def object_raw(ctx: CommandContext, args: str | None) -> None:
    (sha,) = _split_args(args, 1, "o.raw :sha1")
    run_github_with_repo(ctx, ApiOperation.OBJECTS_RAW, sha)


def network_meta(ctx: CommandContext, args: str | None) -> None:
    run_github_with_repo(ctx, ApiOperation.NETWORK_META)


def network_data_chunk(ctx: CommandContext, args: str | None) -> None:
    (nethash,) = _split_args(args, 1, "n.data_chunk :net_hash")
    run_github_with_repo(ctx, ApiOperation.NETWORK_DATA_CHUNK, nethash)


COMMANDS: dict[Command, Handler] = {
    Command.HELP: show_help,
    Command.EXIT: exit_shell,
    Command.REPO: set_repo,
    Command.LOGIN: set_login,
    Command.LOADCFG: set_loadcfg,
    Command.CD: change_directory,
    Command.REPO_SHOW: repo_show,
    Command.REPO_LIST: repo_list,
    Command.REPO_SEARCH: repo_search,
    Command.REPO_WATCH: repo_watch,
    Command.REPO_UNWATCH: repo_unwatch,
    Command.REPO_FORK: repo_fork,
    Command.REPO_CREATE: repo_create,
    Command.REPO_DELETE: repo_delete,
    Command.REPO_SET_PRIVATE: repo_set_private,
    Command.REPO_SET_PUBLIC: repo_set_public,
    Command.REPO_NETWORK: repo_network,
    Command.REPO_TAGS: repo_tags,
    Command.REPO_BRANCHES: repo_branches,
    Command.ISSUE_LIST: issue_list,
    Command.ISSUE_VIEW: issue_view,
    Command.ISSUE_SEARCH: issue_search,
    Command.ISSUE_OPEN: issue_open,
    Command.ISSUE_EDIT: issue_edit,
    Command.ISSUE_CLOSE: issue_close,
    Command.ISSUE_REOPEN: issue_reopen,
    Command.ISSUE_LABEL: issue_label,
    Command.ISSUE_COMMENT: issue_comment,
    Command.USER_SEARCH: user_search,
    Command.USER_SHOW: user_show,
    Command.USER_UPDATE: user_update,
    Command.USER_FOLLOWERS: user_followers,
    Command.USER_FOLLOWING: user_following,
    Command.USER_FOLLOW: user_follow,
    Command.USER_UNFOLLOW: user_unfollow,
    Command.USER_PUB_KEYS: user_pub_keys,
    Command.USER_PUB_KEYS_ADD: user_pub_keys_add,
    Command.USER_PUB_KEYS_DEL: user_pub_keys_del,
    Command.COMMIT_BRANCH: commit_branch,
    Command.COMMIT_FILE: commit_file,
    Command.COMMIT_SHOW: commit_show,
    Command.OBJECT_TREE: object_tree,
    Command.OBJECT_BLOB: object_blob,
    Command.OBJECT_RAW: object_raw,
    Command.NETWORK_META: network_meta,
    Command.NETWORK_DATA_CHUNK: network_data_chunk,
}
