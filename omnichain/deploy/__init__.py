from .steps import DEPLOY_STEPS, run_deploy

__all__ = ['DEPLOY_STEPS', 'run_deploy']
