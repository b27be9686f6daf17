"""loadledger Gateway -- 任务执行核心的 HTTP 边界"""
