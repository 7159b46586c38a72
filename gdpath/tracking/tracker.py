"""
生成跟踪器

维护 脚本路径 -> 类名 映射和已写入 Res 的资源集合，
处理文件删除、移动、目录删除时的同步。

不变量：
- 脚本路径在映射中 <=> 对应的 <ClassName>Path 文件存在。
  多个脚本可以推导出同一个类名，共用一个生成文件；
  只有最后一个使用者被移除时才删除该文件。
- 资源集合中的每个路径都出现在 Res 文件中（字段名不重复）。
所有写操作先落盘，成功后才修改状态。
"""

from typing import Dict, FrozenSet, List, Optional, Sequence, Set

from ..core.naming import derive_class_name, resource_field_name
from .state import TrackerState


def _folder_prefix(folder: str) -> str:
    """res://a -> res://a/（避免 res://a 匹配 res://ab/...）"""
    return folder if folder.endswith("/") else folder + "/"


class GenerationTracker:
    """
    生成跟踪器

    示例：
        tracker = GenerationTracker(writer)
        tracker.record_script("res://Main.cs", "Main")
        tracker.add_resource("res://Main.tscn")
        tracker.on_file_removed("res://Main.cs")
    """

    def __init__(
        self,
        writer,
        state: Optional[TrackerState] = None,
        script_extensions: Sequence[str] = ('.cs',),
        resource_extensions: Sequence[str] = ('.tscn',),
    ):
        """
        初始化跟踪器

        Args:
            writer: PathNamespaceWriter
            state: 初始状态（默认为空）
            script_extensions: 可识别的脚本扩展名
            resource_extensions: 需要写入 Res 的资源扩展名
        """
        self.writer = writer
        self.state = state if state is not None else TrackerState()
        self.script_extensions = tuple(script_extensions)
        self.resource_extensions = tuple(resource_extensions)

    @property
    def scripts(self) -> Dict[str, str]:
        return dict(self.state.scripts)

    @property
    def resources(self) -> FrozenSet[str]:
        return frozenset(self.state.resources)

    def is_script_tracked(self, script_path: str) -> bool:
        return script_path in self.state.scripts

    def is_resource_tracked(self, resource_path: str) -> bool:
        return resource_path in self.state.resources

    def class_owners(self, class_name: str, exclude: Optional[str] = None) -> List[str]:
        """使用该类名的脚本路径（排除 exclude）"""
        return sorted(
            path for path, name in self.state.scripts.items()
            if name == class_name and path != exclude
        )

    # ------------------------------------------------------------------
    # 新增
    # ------------------------------------------------------------------

    def record_script(self, script_path: str, class_name: str) -> None:
        """
        记录生成成功的脚本

        类名由脚本路径推导，同一路径的类名通常不会变化；
        其他 EditorHost 实现可能给出不同的类名，此时删除旧的生成文件
        （旧类名没有其他使用者时）。
        """
        owners = self.class_owners(class_name, exclude=script_path)
        if owners:
            self.writer.warn(
                f"脚本 '{script_path}' 与 '{owners[0]}' 生成同一个类 {class_name}Path，共用生成文件"
            )

        old_class_name = self.state.scripts.get(script_path)
        if old_class_name is not None and old_class_name != class_name:
            if not self.class_owners(old_class_name, exclude=script_path):
                self.writer.remove_class_file(old_class_name)

        self.state.scripts[script_path] = class_name

    def is_resource_type(self, resource_path: str) -> bool:
        return any(resource_path.endswith(ext) for ext in self.resource_extensions)

    def should_track_resource(self, resource_path: str) -> bool:
        """资源类型匹配且尚未跟踪"""
        if not self.is_resource_type(resource_path):
            return False
        return resource_path not in self.state.resources

    def add_resource(self, resource_path: str) -> bool:
        """
        添加资源并重新生成 Res

        字段名与已跟踪资源冲突时不加入，并打印警告

        Returns:
            True 如果资源是新加入的
        """
        if not self.should_track_resource(resource_path):
            return False

        conflict = self._conflicting_resource(resource_path, self.state.resources)
        if conflict is not None:
            self._warn_resource_conflict(resource_path, conflict)
            return False

        self._commit_resources(self.state.resources | {resource_path})
        return True

    # ------------------------------------------------------------------
    # 删除 / 移动
    # ------------------------------------------------------------------

    def on_file_removed(self, file_path: str) -> bool:
        """
        文件被删除

        Returns:
            True 如果跟踪状态发生变化
        """
        changed = False

        if file_path in self.state.scripts:
            self._release_script(file_path)
            changed = True

        if file_path in self.state.resources:
            self._commit_resources(self.state.resources - {file_path})
            changed = True

        return changed

    def on_files_moved(self, old_path: str, new_path: str) -> bool:
        """
        文件被移动或重命名

        脚本：映射改用新路径，类名按新路径重新推导；类名变化时重命名生成文件。
        新路径不再是可识别的脚本时按删除处理。
        资源：旧路径移出集合，新路径（类型匹配且字段名不冲突时）加入，然后重新生成 Res。

        Returns:
            True 如果跟踪状态发生变化
        """
        changed = False

        if old_path in self.state.scripts:
            self._move_script(old_path, new_path)
            changed = True

        if old_path in self.state.resources and new_path not in self.state.resources:
            updated = self.state.resources - {old_path}
            if self.is_resource_type(new_path):
                conflict = self._conflicting_resource(new_path, updated)
                if conflict is None:
                    updated = updated | {new_path}
                else:
                    self._warn_resource_conflict(new_path, conflict)
            self._commit_resources(updated)
            changed = True

        return changed

    def on_folder_removed(self, folder: str) -> bool:
        """
        目录被删除：目录下所有已跟踪的脚本和资源都移除

        Returns:
            True 如果跟踪状态发生变化
        """
        prefix = _folder_prefix(folder)
        changed = False

        for script_path in sorted(p for p in self.state.scripts if p.startswith(prefix)):
            self._release_script(script_path)
            changed = True

        removed = {p for p in self.state.resources if p.startswith(prefix)}
        if removed:
            self._commit_resources(self.state.resources - removed)
            changed = True

        return changed

    def on_folder_moved(self, old_folder: str, new_folder: str) -> bool:
        """目录被移动：对目录下每个已跟踪路径执行 on_files_moved"""
        old_prefix = _folder_prefix(old_folder)
        new_prefix = _folder_prefix(new_folder)

        tracked = set(self.state.scripts) | self.state.resources
        changed = False
        for path in sorted(p for p in tracked if p.startswith(old_prefix)):
            if self.on_files_moved(path, new_prefix + path[len(old_prefix):]):
                changed = True

        return changed

    # ------------------------------------------------------------------
    # 维护
    # ------------------------------------------------------------------

    def prune_missing(self) -> int:
        """
        移除生成文件已不存在的脚本（用于加载持久化状态后）

        Returns:
            移除的条目数
        """
        missing = [
            path for path, class_name in self.state.scripts.items()
            if not self.writer.class_file_exists(class_name)
        ]
        for path in missing:
            del self.state.scripts[path]
        return len(missing)

    def clear(self) -> int:
        """
        删除所有生成文件并清空状态

        Returns:
            删除的文件数
        """
        removed = 0
        for script_path in sorted(self.state.scripts):
            if self.writer.remove_class_file(self.state.scripts[script_path]):
                removed += 1
            del self.state.scripts[script_path]

        if self.writer.remove_resource_file():
            removed += 1
        self.state.resources.clear()

        return removed

    # ------------------------------------------------------------------
    # 内部
    # ------------------------------------------------------------------

    def _release_script(self, script_path: str) -> None:
        """移除映射项；类名没有其他使用者时删除生成文件"""
        class_name = self.state.scripts[script_path]
        if not self.class_owners(class_name, exclude=script_path):
            self.writer.remove_class_file(class_name)
        del self.state.scripts[script_path]

    def _move_script(self, old_path: str, new_path: str) -> None:
        old_class_name = self.state.scripts[old_path]
        new_class_name = derive_class_name(new_path, self.script_extensions)

        if new_class_name is None:
            self._release_script(old_path)
            return

        if new_class_name != old_class_name:
            old_shared = bool(self.class_owners(old_class_name, exclude=old_path))
            new_owners = self.class_owners(new_class_name, exclude=old_path)

            if new_owners:
                # 新类名已有生成文件，不覆盖
                self.writer.warn(
                    f"脚本 '{new_path}' 与 '{new_owners[0]}' 生成同一个类 {new_class_name}Path，共用生成文件"
                )
                if not old_shared:
                    self.writer.remove_class_file(old_class_name)
            else:
                self.writer.rename_class_file(old_class_name, new_class_name, keep_old=old_shared)

        del self.state.scripts[old_path]
        self.state.scripts[new_path] = new_class_name

    def _conflicting_resource(self, resource_path: str, resources: Set[str]) -> Optional[str]:
        """与 resource_path 字段名相同的已跟踪资源"""
        field_name = resource_field_name(resource_path)
        for other in sorted(resources):
            if other != resource_path and resource_field_name(other) == field_name:
                return other
        return None

    def _warn_resource_conflict(self, resource_path: str, existing: str) -> None:
        self.writer.warn(
            f"资源 '{resource_path}' 与 '{existing}' 的字段名 {resource_field_name(resource_path)} 重名，未加入 Res"
        )

    def _commit_resources(self, resources: Set[str]) -> None:
        """先写 Res 文件，成功后再更新集合"""
        self.writer.write_resource_file(resources)
        self.state.resources = set(resources)

    def __repr__(self) -> str:
        return (
            f"<GenerationTracker scripts={len(self.state.scripts)} "
            f"resources={len(self.state.resources)}>"
        )
