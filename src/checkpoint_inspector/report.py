"""Checkpoint report assembly."""

import dataclasses
import logging
from pathlib import Path
from typing import Iterable, Optional, Union

from .config import DisplayOptions
from .engines import extract_identity
from .exceptions import MetadataParseError
from .metadata.reader import read_config_dump, read_spec_dump, read_status_file
from .models import (
    CheckpointReport,
    CheckpointSizeMetrics,
    ContainerConfig,
    ContainerIdentity,
    ReportTable,
)
from .mounts import build_mounts_table
from .render import RichTableSink, TableSink
from .stats import StatisticsReader, build_stats_table, get_dump_statistics
from .utils.size import byte_to_string, get_size_metrics

logger = logging.getLogger(__name__)

BASE_HEADER = ("Container", "Image", "ID", "Runtime", "Created", "Engine")
SHORT_ID_LENGTH = 12

PathLike = Union[str, Path]


def short_id(container_id: str) -> str:
    """Abbreviate a container ID to its first 12 characters."""
    return container_id[:SHORT_ID_LENGTH]


def build_container_table(
    checkpoint_dir: PathLike,
    config: ContainerConfig,
    identity: ContainerIdentity,
    sizes: CheckpointSizeMetrics,
) -> ReportTable:
    """Build the base header/row pair of a checkpoint report.

    IP and MAC columns exist only when the identity carries them; the root
    filesystem diff column only when the diff has a non-zero size.
    """
    header = list(BASE_HEADER)
    row = [
        identity.name,
        config.rootfs_image_name,
        short_id(config.id),
        config.oci_runtime,
        identity.created,
        identity.engine.value,
    ]

    if identity.ip:
        header.append("IP")
        row.append(identity.ip)
    if identity.mac:
        header.append("MAC")
        row.append(identity.mac)

    header.append("CHKPT Size")
    row.append(byte_to_string(sizes.total_size))

    if sizes.rootfs_diff_size:
        header.append("Root Fs Diff Size")
        row.append(byte_to_string(sizes.rootfs_diff_size))

    return ReportTable(
        header=tuple(header),
        rows=(tuple(row),),
        title=f"Displaying container checkpoint data from {checkpoint_dir}",
    )


def build_checkpoint_report(
    checkpoint_dir: PathLike, options: Optional[DisplayOptions] = None
) -> CheckpointReport:
    """체크포인트 디렉터리를 읽어 통계를 제외한 보고서를 만듭니다.

    Args:
        checkpoint_dir: 압축 해제된 체크포인트 디렉터리
            - 예: "/tmp/checkpoint-nginx"
        options: 표시 옵션 (기본값: DisplayOptions())

    Returns:
        CheckpointReport: 컨테이너 표와 선택적 마운트 표

    Raises:
        MetadataReadError: config.dump / spec.dump / status 파일 오류
        ClassificationError: 컨테이너 엔진을 알 수 없는 경우
        MetadataParseError: CRI-O 메타데이터가 손상된 경우
        TraversalError: 체크포인트 크기 계산 실패

    Examples:
        report = build_checkpoint_report("/tmp/checkpoint-nginx")
        print(report.identity.engine.value)
        # 출력: Podman
    """
    options = options or DisplayOptions()

    config = read_config_dump(checkpoint_dir)
    spec = read_spec_dump(checkpoint_dir)

    try:
        identity = extract_identity(config, spec, lambda: read_status_file(checkpoint_dir))
    except MetadataParseError as e:
        raise MetadataParseError(
            f"getting container checkpoint information failed: {e}"
        ) from e

    sizes = get_size_metrics(checkpoint_dir)
    container_table = build_container_table(checkpoint_dir, config, identity, sizes)

    mounts_table = None
    if options.show_mounts:
        mounts_table = build_mounts_table(spec.mounts, full_paths=options.full_paths)

    return CheckpointReport(
        directory=str(checkpoint_dir),
        identity=identity,
        sizes=sizes,
        container=container_table,
        mounts=mounts_table,
    )


def show_container_checkpoint(
    checkpoint_dir: PathLike,
    options: Optional[DisplayOptions] = None,
    sink: Optional[TableSink] = None,
    stats_reader: Optional[StatisticsReader] = None,
) -> CheckpointReport:
    """체크포인트 보고서를 만들고 표시합니다.

    컨테이너 표와 마운트 표를 먼저 출력한 뒤, print_stats 옵션이 켜진
    경우에만 CRIU 덤프 통계를 조회합니다. 통계 조회에 실패해도 이미
    출력된 기본 보고서는 그대로 남습니다.

    Args:
        checkpoint_dir: 압축 해제된 체크포인트 디렉터리
        options: 표시 옵션 (show_mounts, print_stats, full_paths)
        sink: 표를 출력할 대상 (기본값: RichTableSink)
        stats_reader: 덤프 통계 조회 함수 (기본값: CritStatisticsReader)

    Returns:
        CheckpointReport: 출력된 모든 표

    Raises:
        CheckpointError: 기본 보고서를 만들 수 없는 경우 (아무것도 출력되지 않음)
        StatisticsError: 통계 조회 실패 (기본 보고서 출력 이후)

    Examples:
        options = DisplayOptions(show_mounts=True, print_stats=True)
        show_container_checkpoint("/tmp/checkpoint-nginx", options)
    """
    options = options or DisplayOptions()
    sink = sink or RichTableSink()

    report = build_checkpoint_report(checkpoint_dir, options)

    sink.render(report.container)
    if report.mounts is not None:
        sink.render(report.mounts)

    if not options.print_stats:
        return report

    statistics = get_dump_statistics(checkpoint_dir, stats_reader)
    stats_table = build_stats_table(statistics)
    sink.render(stats_table)
    return dataclasses.replace(report, statistics=stats_table)


def show_container_checkpoints(
    checkpoint_dirs: Iterable[PathLike],
    options: Optional[DisplayOptions] = None,
    sink: Optional[TableSink] = None,
    stats_reader: Optional[StatisticsReader] = None,
) -> list[CheckpointReport]:
    """Show several checkpoints one after another.

    Stops at the first failing directory; reports of earlier directories
    have already been rendered.
    """
    sink = sink or RichTableSink()
    reports = []
    for checkpoint_dir in checkpoint_dirs:
        logger.debug("Inspecting checkpoint %s", checkpoint_dir)
        reports.append(show_container_checkpoint(checkpoint_dir, options, sink, stats_reader))
    return reports
