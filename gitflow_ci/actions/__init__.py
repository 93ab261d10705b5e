from enum import Enum

from gitflow_ci.actions.common import AbstractGitflowAction, ActionContext
from gitflow_ci.actions.feature import StartFeatureAction, FinishFeatureAction
from gitflow_ci.actions.hotfix import StartHotfixAction, FinishHotfixAction
from gitflow_ci.actions.release import StartReleaseAction, TestReleaseAction, PublishReleaseAction, \
    FinishReleaseAction
from gitflow_ci.cause import AbstractGitflowCause


class ActionType(Enum):
    START_RELEASE = StartReleaseAction
    TEST_RELEASE = TestReleaseAction
    PUBLISH_RELEASE = PublishReleaseAction
    FINISH_RELEASE = FinishReleaseAction
    START_HOTFIX = StartHotfixAction
    FINISH_HOTFIX = FinishHotfixAction
    START_FEATURE = StartFeatureAction
    FINISH_FEATURE = FinishFeatureAction

    @property
    def action_name(self) -> str:
        return self.value.ACTION_NAME


def create_action(action_type: ActionType, context: ActionContext, cause: AbstractGitflowCause) \
        -> AbstractGitflowAction:
    return action_type.value(context, cause)
