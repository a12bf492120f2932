#!/usr/bin/env python3
"""
单元测试运行脚本
按层选择测试集，可选生成覆盖率报告
"""

import subprocess
import sys
import argparse


# 各层对应的测试文件
SUITES = {
    "service": "tests/test_product_service.py",
    "router": "tests/test_products_router.py",
    "models": "tests/test_models.py",
    "deps": "tests/test_dependencies.py",
}


def run_tests(test_pattern=None, verbose=False, coverage=False):
    """运行单元测试

    Args:
        test_pattern: pytest 目标参数列表 (如 ["tests/test_models.py"])
        verbose: 是否显示详细输出
        coverage: 是否生成覆盖率报告
    """
    cmd = [sys.executable, "-m", "pytest"]

    cmd.extend([
        *(test_pattern or ["tests/"]),
        "-v" if verbose else "-q",
        "--tb=short",
    ])

    if coverage:
        cmd.extend([
            "--cov=app",
            "--cov-report=html:htmlcov",
            "--cov-report=term-missing"
        ])

    print(f"🚀 运行命令: {' '.join(cmd)}")
    print("=" * 50)

    result = subprocess.run(cmd)
    if result.returncode == 0:
        print("\n✅ 测试运行完成")
    else:
        print(f"\n❌ 测试失败，退出码: {result.returncode}")
    return result.returncode == 0


def main():
    parser = argparse.ArgumentParser(description="商品库存服务单元测试运行器")
    group = parser.add_mutually_exclusive_group()
    for name, path in SUITES.items():
        group.add_argument(
            f"--{name}",
            action="store_true",
            help=f"只运行 {path}"
        )
    parser.add_argument(
        "--coverage",
        action="store_true",
        help="生成覆盖率报告"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="详细输出模式"
    )
    parser.add_argument(
        "test_name",
        nargs="?",
        help="特定测试函数名 (如 test_renumber_product)"
    )

    args = parser.parse_args()

    # 如果提供了特定测试名
    if args.test_name:
        return 0 if run_tests(["tests/", "-k", args.test_name], verbose=True) else 1

    pattern = next(([path] for name, path in SUITES.items() if getattr(args, name)), None)
    success = run_tests(pattern, args.verbose, args.coverage)

    if args.coverage and success:
        print("\n📊 覆盖率报告已生成到 htmlcov/ 目录")

    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())
