#!/usr/bin/env python3
"""
templadoc - Javadoc comments from templates

Applies documentation templates to Java sources and keeps constructor and
setter @param entries in step with the comments of the fields they set.
"""

import sys
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

import click
import yaml
from dotenv import load_dotenv
from tqdm import tqdm

from .commenter.comment_generator import CommentGenerator
from .errors import TemplaDocError
from .models.code_element import MethodRole
from .parser.java_parser import JavaParser
from .parser.source_document import SourceDocument
from .sync.synchronizer import FieldParamSynchronizer
from .sync.watcher import ChangeNotification, FileWatcher
from .templates.store import DEFAULT_TEMPLATE, TemplateItem, TemplateStore
from .utils.config import Config
from .utils.file_handler import FileHandler
from .utils.logger import setup_logging

# Load environment variables early
load_dotenv()

DEFAULT_CONFIG_FILE = Path(".templadoc.yaml")

FIXED_KEYS = [item.value for item in TemplateItem] + [role.value for role in MethodRole.builtin_roles()]


class TemplaDoc:
    """Main application class"""

    def __init__(self, config: Config, store: Optional[TemplateStore] = None):
        self.config = config
        self.store = store or TemplateStore.load(config.templates_file)
        self.parser = JavaParser(config.encoding)
        self.files = FileHandler(config)
        self.generator = CommentGenerator(self.store)
        self.synchronizer = FieldParamSynchronizer(self.parser)
        self.logger = logging.getLogger(__name__)

    def apply(self, paths: Iterable[Path], output_dir: Optional[Path] = None) -> bool:
        """Apply templates to every Java file under ``paths``"""
        jobs = self._collect(paths)
        if not jobs:
            self.logger.warning("No Java files found")
            return False

        self.logger.info(f"Applying templates to {len(jobs)} Java files")

        inserted = 0
        failed = 0
        for java_file, root in tqdm(jobs, desc="Applying templates", disable=len(jobs) < 2):
            try:
                document = self._load(java_file)
                inserted += self.generator.add_comments(document)
            except TemplaDocError as e:
                self.logger.warning(f"✗ {java_file.name}: {e}")
                failed += 1
                continue

            target = self.files.output_path(java_file, root, output_dir)
            if document.modified or target != java_file:
                document.save(target, self.config.encoding)

        self.logger.info(f"Inserted {inserted} comments, {failed} files failed")
        return failed == 0

    def sync(self, paths: Iterable[Path]) -> bool:
        """Run one synchronization pass on every Java file under ``paths``"""
        jobs = self._collect(paths)
        if not jobs:
            self.logger.warning("No Java files found")
            return False

        failed = 0
        for java_file, _ in jobs:
            if not self.sync_file(java_file):
                failed += 1
        return failed == 0

    def sync_file(self, java_file: Path) -> bool:
        try:
            document = self._load(java_file)
            result = self.synchronizer.on_document_changed(document)
        except TemplaDocError as e:
            self.logger.warning(f"✗ {java_file.name}: {e}")
            return False

        if document.modified:
            document.save(java_file, self.config.encoding)
            self.logger.info(f"✓ {java_file.name}: {result.rewritten_comments} comments updated")
        return True

    def watch(self, paths: Iterable[Path], max_polls: Optional[int] = None) -> None:
        """Resynchronize files as they change, until interrupted"""
        watcher = FileWatcher(paths, self.files.find_java_files, self.config.poll_interval)

        def on_change(notification: ChangeNotification):
            # One poll may batch several saves; each file is its own container
            for java_file in notification.paths:
                self.logger.debug(f"Change notification for {java_file}")
                self.sync_file(java_file)
                watcher.acknowledge(java_file)

        self.logger.info(f"Watching {', '.join(str(p) for p in watcher.roots)} (Ctrl+C to stop)")
        try:
            watcher.run(on_change, max_polls)
        except KeyboardInterrupt:
            self.logger.info("Stopped watching")

    def _load(self, java_file: Path) -> SourceDocument:
        return SourceDocument.from_file(java_file, self.config.encoding, self.parser)

    def _collect(self, paths: Iterable[Path]) -> List[Tuple[Path, Path]]:
        """Java files paired with the root they were found under"""
        jobs = []
        for path in paths:
            path = Path(path)
            if path.is_dir():
                jobs.extend((java_file, path) for java_file in self.files.find_java_files(path))
            else:
                jobs.extend((java_file, java_file.parent) for java_file in self.files.collect([path]))
        return jobs


def _read_template(template: Optional[str], template_file) -> str:
    if template_file is not None:
        return template_file.read()
    if template is None:
        return DEFAULT_TEMPLATE
    return template.replace("\\n", "\n")


@click.group()
@click.option('--config', 'config_path', type=click.Path(dir_okay=False, path_type=Path),
              help='YAML config file (default: ./.templadoc.yaml if present)')
@click.option('--templates', 'templates_file', type=click.Path(dir_okay=False, path_type=Path),
              help='Template store file')
@click.option('--verbose', '-v', is_flag=True, help='Show debug output')
@click.pass_context
def main(ctx, config_path, templates_file, verbose):
    """
    Generate Javadoc comments from templates and keep @param entries
    in sync with field documentation.
    """
    setup_logging(verbose)

    try:
        config = Config.from_file(config_path or DEFAULT_CONFIG_FILE)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise click.ClickException(f"Couldn't load config: {e}")

    if templates_file:
        config.templates_file = templates_file

    ctx.obj = config


@main.command()
@click.argument('paths', nargs=-1, required=True, type=click.Path(exists=True, path_type=Path))
@click.option('--output', '-o', 'output_dir', type=click.Path(file_okay=False, path_type=Path),
              help='Write documented files here instead of in place')
@click.pass_obj
def apply(config, paths, output_dir):
    """Add template comments to undocumented declarations."""
    app = TemplaDoc(config)
    sys.exit(0 if app.apply(paths, output_dir) else 1)


@main.command()
@click.argument('paths', nargs=-1, required=True, type=click.Path(exists=True, path_type=Path))
@click.pass_obj
def sync(config, paths):
    """Update @param entries from field comments once."""
    app = TemplaDoc(config)
    sys.exit(0 if app.sync(paths) else 1)


@main.command()
@click.argument('paths', nargs=-1, required=True, type=click.Path(exists=True, path_type=Path))
@click.option('--interval', type=float, default=None, help='Seconds between polls')
@click.pass_obj
def watch(config, paths, interval):
    """Keep @param entries in sync while files are edited."""
    if interval:
        config.poll_interval = interval
    TemplaDoc(config).watch(paths)


@main.group()
@click.pass_context
def templates(ctx):
    """Manage the template store."""
    try:
        ctx.obj = TemplateStore.load(ctx.obj.templates_file)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise click.ClickException(f"Couldn't load templates: {e}")


@templates.command('list')
@click.pass_obj
def list_templates(store):
    """List stored templates."""
    if not store.keys():
        click.echo("No templates configured")
        return
    for key in store.keys():
        first_line = store.get(key).split('\n', 1)[0]
        click.echo(f"{key}: {first_line}")


@templates.command('show')
@click.argument('key')
@click.pass_obj
def show_template(store, key):
    """Print one template (custom ones as CUSTOM:<name>)."""
    template = store.get(key)
    if template is None:
        raise click.ClickException(f"No template stored under {key}")
    click.echo(template)


@templates.command('set')
@click.argument('key', type=click.Choice(FIXED_KEYS))
@click.argument('template', required=False)
@click.option('--file', 'template_file', type=click.File('r'), help='Read the template from a file')
@click.pass_obj
def set_template(store, key, template, template_file):
    """Store the template of an item or method role (\\n for new lines)."""
    store.put(key, _read_template(template, template_file))
    store.save()
    click.echo(f"Saved {key}")


@templates.command('add-custom')
@click.argument('name')
@click.argument('template', required=False)
@click.option('--file', 'template_file', type=click.File('r'), help='Read the template from a file')
@click.pass_obj
def add_custom_template(store, name, template, template_file):
    """Store a custom method template."""
    try:
        store.add_custom_template(name, _read_template(template, template_file))
    except ValueError as e:
        raise click.ClickException(str(e))
    store.save()
    click.echo(f"Saved custom template {name}")


@templates.command('remove')
@click.argument('key')
@click.pass_obj
def remove_template(store, key):
    """Remove a template; removing an item disables it."""
    if not store.remove_method_template(key):
        raise click.ClickException(f"No template stored under {key}")
    store.save()
    click.echo(f"Removed {key}")


@templates.command('clear-methods')
@click.pass_obj
def clear_method_templates(store):
    """Disable method documentation and drop every method template."""
    store.remove_all_method_templates()
    store.save()
    click.echo("Removed all method templates")


if __name__ == '__main__':
    main()
