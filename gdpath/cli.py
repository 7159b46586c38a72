"""
Godot Path Generator - CLI 接口

为 Godot 场景生成节点路径常量（C#），并随项目文件变化自动更新
"""
import click
from pathlib import Path
from rich.console import Console
from rich.table import Table
import sys

from gdpath import __version__

console = Console()


@click.group()
@click.version_option(version=__version__)
def cli():
    """Godot Path Generator - 节点路径常量生成工具

    \b
    为当前编辑的场景生成 GPG.<ClassName>Path 常量类，
    并把处理过的场景文件写入 GPG.Res。

    \b
    可用命令：
      gdpath init       写入默认配置 gdpath.yaml
      gdpath generate   为一个场景生成一次
      gdpath watch      监听项目并自动生成
      gdpath status     显示已跟踪的脚本和资源
      gdpath clean      删除所有生成文件

    \b
    常用示例：
      gdpath watch --project "F:\\Games\\MyGame"
      gdpath generate --project . --scene res://scenes/Main.tscn
    """
    pass


def load_config(project):
    """加载项目配置；失败时退出"""
    from gdpath.core.config import Config

    try:
        return Config(project_path=str(Path(project).resolve()))
    except (ValueError, OSError) as e:
        console.print(f"[red]错误: 无法加载配置: {e}[/red]")
        sys.exit(1)


def build_orchestrator(config, scene=None, verbose=False):
    from gdpath.watcher.orchestrator import Orchestrator

    return Orchestrator.from_config(config, scene=scene, console=console, verbose=verbose)


@cli.command()
@click.option('--project', '-p', type=click.Path(exists=True, file_okay=False), default='.',
              help='Godot 项目根目录（默认: 当前目录）')
@click.option('--force', is_flag=True, help='覆盖已有的配置文件')
def init(project, force):
    """写入默认配置文件 gdpath.yaml"""
    config = load_config(project)

    if config.exists() and not force:
        console.print(f"[yellow]配置文件已存在: {config.config_path}（使用 --force 覆盖）[/yellow]")
        return

    config.save()
    console.print(f"[green]OK[/green] 已写入配置: {config.config_path}")


@cli.command()
@click.option('--project', '-p', type=click.Path(exists=True, file_okay=False), default='.',
              help='Godot 项目根目录（默认: 当前目录）')
@click.option('--scene', '-s', type=str, help='场景路径，如 res://scenes/Main.tscn（默认: 最近修改的场景）')
@click.option('--verbose', '-v', is_flag=True, help='显示详细输出（用于调试）')
def generate(project, scene, verbose):
    """为一个场景生成节点路径常量

    \b
    示例：
      gdpath generate --project .
      gdpath generate --project . --scene res://scenes/Main.tscn
    """
    from gdpath.core.errors import GenerationError

    config = load_config(project)
    orchestrator = build_orchestrator(config, scene=scene, verbose=verbose)

    try:
        root = orchestrator.host.get_edited_scene_root()
    except GenerationError as e:
        console.print(f"[red]错误: {e}[/red]")
        sys.exit(1)

    if root is None:
        console.print("[red]错误: 没有找到场景文件[/red]")
        sys.exit(1)

    result = orchestrator.generate_scene(root)

    if not result.get('generated'):
        console.print(f"[yellow]未生成: {result.get('reason')}[/yellow]")
        sys.exit(1)

    table = Table(show_header=False)
    table.add_column("项", style="cyan", width=16)
    table.add_column("值", style="yellow")
    table.add_row("场景", result['scene_file'])
    table.add_row("脚本", result['script_path'])
    table.add_row("类名", f"{config.namespace}.{result['class_name']}Path")
    table.add_row("节点数", str(result['node_count']))
    table.add_row("输出文件", result['file'])
    console.print(table)


@cli.command()
@click.option('--project', '-p', type=click.Path(exists=True, file_okay=False), default='.',
              help='Godot 项目根目录（默认: 当前目录）')
@click.option('--scene', '-s', type=str, help='固定监听的场景（默认: 最近修改的场景）')
@click.option('--verbose', '-v', is_flag=True, help='打印每个文件系统事件')
def watch(project, scene, verbose):
    """监听项目目录并自动生成

    \b
    - 文件变化：为当前场景重新生成 <ClassName>Path
    - 删除脚本：删除对应的生成文件
    - 移动/重命名：同步生成文件和 Res
    按 Ctrl+C 停止。
    """
    from gdpath.watcher.observer import ProjectWatcher

    config = load_config(project)
    orchestrator = build_orchestrator(config, scene=scene, verbose=verbose)

    ignore_files = []
    if config.persist_state:
        state_res_path = orchestrator.filesystem.to_res_path(config.state_file)
        if state_res_path:
            ignore_files.append(state_res_path)

    console.print(f"\n[bold cyan]=== 监听 {orchestrator.filesystem.root} ===[/bold cyan]")
    console.print(f"输出目录: {config.output_dir}")
    console.print("按 Ctrl+C 停止\n")

    watcher = ProjectWatcher(orchestrator, ignore_dirs=config.ignore_dirs,
                             ignore_files=ignore_files, console=console)
    watcher.run_forever()


@cli.command()
@click.option('--project', '-p', type=click.Path(exists=True, file_okay=False), default='.',
              help='Godot 项目根目录（默认: 当前目录）')
def status(project):
    """显示已跟踪的脚本和资源"""
    config = load_config(project)
    orchestrator = build_orchestrator(config)
    tracker = orchestrator.tracker

    console.print(f"\n[bold cyan]=== 跟踪状态 ===[/bold cyan]")
    console.print(f"项目路径: {orchestrator.filesystem.root}\n")

    table = Table()
    table.add_column("脚本")
    table.add_column("类名")
    table.add_column("生成文件")
    for script_path, class_name in sorted(tracker.scripts.items()):
        table.add_row(script_path, f"{class_name}Path", orchestrator.writer.class_file_path(class_name))
    console.print(table)

    res_table = Table()
    res_table.add_column("资源")
    for resource_path in sorted(tracker.resources):
        res_table.add_row(resource_path)
    console.print(res_table)

    console.print(f"\n脚本: {len(tracker.scripts)}  资源: {len(tracker.resources)}\n")


@cli.command()
@click.option('--project', '-p', type=click.Path(exists=True, file_okay=False), default='.',
              help='Godot 项目根目录（默认: 当前目录）')
def clean(project):
    """删除所有生成文件和状态文件"""
    from gdpath.core.errors import GenerationError

    config = load_config(project)
    orchestrator = build_orchestrator(config)

    try:
        removed = orchestrator.tracker.clear()
    except GenerationError as e:
        console.print(f"[red]错误: {e}[/red]")
        sys.exit(1)

    if config.state_file.exists():
        config.state_file.unlink()

    console.print(f"[green]已删除 {removed} 个生成文件[/green]")


def main():
    """CLI 入口点"""
    cli()


if __name__ == '__main__':
    main()
